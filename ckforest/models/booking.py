from sqlalchemy import String, Integer, Float, DateTime, Boolean
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from ckforest.db.session import Base

class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)

    package_id: Mapped[str] = mapped_column(String(64), index=True)
    package_name: Mapped[str] = mapped_column(String(120), default="")
    checkin_date: Mapped[str] = mapped_column(String(10), index=True)  # YYYY-MM-DD

    full_name: Mapped[str] = mapped_column(String(200))
    email: Mapped[str] = mapped_column(String(320), index=True)
    phone: Mapped[str] = mapped_column(String(40))

    adults: Mapped[int] = mapped_column(Integer, default=0)
    children: Mapped[int] = mapped_column(Integer, default=0)
    headcount_total: Mapped[int] = mapped_column(Integer, default=0)
    favorite_nature_thing: Mapped[str] = mapped_column(String(200), default="")

    wants_meals: Mapped[bool] = mapped_column(Boolean, default=False)
    wants_transportation: Mapped[bool] = mapped_column(Boolean, default=False)
    wants_tour_guide: Mapped[bool] = mapped_column(Boolean, default=False)

    price_per_person: Mapped[int] = mapped_column(Integer, default=0)
    subtotal: Mapped[int] = mapped_column(Integer, default=0)
    deposit_due: Mapped[float] = mapped_column(Float, default=0)  # half of an odd subtotal is x.5
    deposit_paid_amount: Mapped[float] = mapped_column(Float, nullable=True)

    status: Mapped[str] = mapped_column(String(30), default="pending_deposit")  # pending_deposit, deposit_paid, confirmed, cancelled
    receipt_url: Mapped[str] = mapped_column(String(1024), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
