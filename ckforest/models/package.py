from sqlalchemy import String, Integer, DateTime, Boolean, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from ckforest.db.session import Base

class Package(Base):
    __tablename__ = "packages"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # slug, e.g. day_stay
    name: Mapped[str] = mapped_column(String(120))
    description: Mapped[str] = mapped_column(Text, default="")
    price_per_person: Mapped[int] = mapped_column(Integer, default=0)  # GYD
    min_headcount: Mapped[int] = mapped_column(Integer, default=1)     # minimum adults
    timing: Mapped[str] = mapped_column(String(120), default="")
    image_url: Mapped[str] = mapped_column(String(512), default="")
    active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
