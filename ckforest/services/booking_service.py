import uuid
from sqlalchemy.orm import Session
from ckforest.models.booking import Booking

STATUSES = ("pending_deposit", "deposit_paid", "confirmed", "cancelled")

# Calendar shows bookings that are paid for or confirmed
CALENDAR_STATUSES = ("deposit_paid", "confirmed")

RECORD_FIELDS = (
    "package_id", "package_name", "checkin_date",
    "full_name", "email", "phone",
    "adults", "children", "headcount_total", "favorite_nature_thing",
    "wants_meals", "wants_transportation", "wants_tour_guide",
    "price_per_person", "subtotal", "deposit_due",
    "receipt_url", "status",
)

def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

def create_booking(db: Session, record: dict) -> Booking:
    """Persist a booking record built by the submission gate."""
    missing = [k for k in ("package_id", "checkin_date", "full_name", "email", "phone") if not record.get(k)]
    if missing:
        raise ValueError(f"missing fields: {', '.join(missing)}")
    status = record.get("status") or "pending_deposit"
    if status not in STATUSES:
        raise ValueError("invalid status")

    data = {k: record[k] for k in RECORD_FIELDS if k in record}
    data["status"] = status
    data["email"] = data["email"].strip().lower()
    data.setdefault("headcount_total", int(data.get("adults", 0)) + int(data.get("children", 0)))

    booking = Booking(id=str(uuid.uuid4()), **data)
    db.add(booking)
    _commit(db)
    db.refresh(booking)
    return booking

def get_booking(db: Session, booking_id: str) -> Booking | None:
    return db.get(Booking, booking_id)

def list_bookings(db: Session, status: str | None = None) -> list[Booking]:
    q = db.query(Booking)
    if status:
        q = q.filter(Booking.status == status)
    return q.order_by(Booking.checkin_date.asc(), Booking.created_at.asc()).all()

def list_bookings_for_email(db: Session, email: str) -> list[Booking]:
    e = (email or "").strip().lower()
    if not e:
        return []
    return db.query(Booking).filter(Booking.email == e).order_by(Booking.created_at.desc()).all()

def list_calendar_bookings(db: Session, start: str, end: str) -> dict[str, list[Booking]]:
    rows = (
        db.query(Booking)
        .filter(
            Booking.status.in_(CALENDAR_STATUSES),
            Booking.checkin_date >= start,
            Booking.checkin_date <= end,
        )
        .order_by(Booking.checkin_date.asc())
        .all()
    )
    out: dict[str, list[Booking]] = {}
    for b in rows:
        out.setdefault(b.checkin_date, []).append(b)
    return out

def set_booking_status(db: Session, booking_id: str, status: str) -> Booking:
    if status not in STATUSES:
        raise ValueError("invalid status")
    b = db.get(Booking, booking_id)
    if not b:
        raise LookupError("booking not found")
    b.status = status
    _commit(db)
    db.refresh(b)
    return b

def record_deposit_receipt(db: Session, booking_id: str, receipt_url: str) -> Booking:
    """Attach a later deposit receipt: the booking moves to deposit_paid for the full deposit."""
    b = db.get(Booking, booking_id)
    if not b:
        raise LookupError("booking not found")
    if b.status != "pending_deposit":
        raise ValueError("deposit already recorded for this booking")
    b.receipt_url = receipt_url
    b.status = "deposit_paid"
    b.deposit_paid_amount = b.deposit_due
    _commit(db)
    db.refresh(b)
    return b
