from datetime import date, timedelta
from sqlalchemy import func
from sqlalchemy.orm import Session
from ckforest.models.booking import Booking

WINDOW_DAYS = 30
TREND_MONTHS = 3

def _month_start(d: date, months_back: int) -> date:
    y, m = d.year, d.month - months_back
    while m < 1:
        m += 12
        y -= 1
    return date(y, m, 1)

def get_dashboard_stats(db: Session, today: date) -> dict:
    """Counts by check-in date relative to `today` (cancelled bookings excluded)."""
    today_s = today.isoformat()
    past_s = (today - timedelta(days=WINDOW_DAYS)).isoformat()
    ahead_s = (today + timedelta(days=WINDOW_DAYS)).isoformat()
    live = db.query(Booking).filter(Booking.status != "cancelled")

    next_date = live.with_entities(func.min(Booking.checkin_date)).filter(Booking.checkin_date >= today_s).scalar()
    last_month = live.filter(Booking.checkin_date >= past_s, Booking.checkin_date < today_s).count()
    next_30 = live.filter(Booking.checkin_date >= today_s, Booking.checkin_date <= ahead_s).count()
    return {
        "nextBookingDate": next_date,
        "bookingsLastMonth": last_month,
        "bookingsNext30Days": next_30,
    }

def get_booking_trends(db: Session, today: date) -> list[dict]:
    """Bookings per check-in month for the current month and the two before it, oldest first."""
    first = _month_start(today, TREND_MONTHS - 1)
    rows = (
        db.query(Booking.checkin_date)
        .filter(Booking.status != "cancelled", Booking.checkin_date >= first.isoformat())
        .all()
    )
    counts: dict[str, int] = {}
    for (checkin,) in rows:
        counts[checkin[:7]] = counts.get(checkin[:7], 0) + 1

    out = []
    for i in range(TREND_MONTHS - 1, -1, -1):
        m = _month_start(today, i)
        out.append({"month": m.strftime("%B"), "bookings": counts.get(m.strftime("%Y-%m"), 0)})
    return out
