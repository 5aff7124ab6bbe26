import re
from sqlalchemy.orm import Session
from ckforest.models.package import Package

DEFAULT_PACKAGES = [
    {
        "id": "day_stay",
        "name": "Day Stay",
        "description": "A full day of exploration and relaxation in nature.",
        "price_per_person": 5000,
        "min_headcount": 10,
        "timing": "9am–5pm",
        "image_url": "https://picsum.photos/seed/daystay/600/400",
    },
    {
        "id": "overnight_a",
        "name": "Overnight Stay (Evening Start)",
        "description": "Arrive in the evening and wake up to the sounds of the forest.",
        "price_per_person": 10000,
        "min_headcount": 10,
        "timing": "6pm–4pm next day",
        "image_url": "https://picsum.photos/seed/overnightA/600/400",
    },
    {
        "id": "overnight_b",
        "name": "Overnight Stay (Morning Start)",
        "description": "Enjoy a full day and a night under the stars.",
        "price_per_person": 10000,
        "min_headcount": 10,
        "timing": "9am–8am next day",
        "image_url": "https://picsum.photos/seed/overnightB/600/400",
    },
    {
        "id": "two_day_special",
        "name": "Book 2 Days + Free Night",
        "description": "An extended adventure with a complimentary night stay.",
        "price_per_person": 10000,
        "min_headcount": 10,
        "timing": "Flexible 2-day booking",
        "image_url": "https://picsum.photos/seed/twoday/600/400",
    },
]

def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", (name or "").lower()).strip("_")

def list_packages(db: Session, include_inactive: bool = False) -> list[Package]:
    q = db.query(Package)
    if not include_inactive:
        q = q.filter(Package.active == True)  # noqa: E712
    return q.order_by(Package.created_at.asc(), Package.id.asc()).all()

def get_package(db: Session, package_id: str, include_inactive: bool = False) -> Package | None:
    p = db.get(Package, package_id)
    if p is None or (not p.active and not include_inactive):
        return None
    return p

def _validate(price_per_person: int, min_headcount: int) -> None:
    if price_per_person < 0:
        raise ValueError("price_per_person must be >= 0")
    if min_headcount < 1:
        raise ValueError("min_headcount must be >= 1")

def create_package(db: Session, data: dict) -> Package:
    _validate(data.get("price_per_person", 0), data.get("min_headcount", 1))
    package_id = data.get("id") or slugify(data.get("name", ""))
    if not package_id:
        raise ValueError("package id or name required")
    if db.get(Package, package_id):
        raise ValueError("package already exists")
    p = Package(**{**data, "id": package_id})
    db.add(p)
    db.commit()
    db.refresh(p)
    return p

def update_package(db: Session, package_id: str, changes: dict) -> Package:
    p = db.get(Package, package_id)
    if not p:
        raise LookupError("package not found")
    _validate(changes.get("price_per_person", p.price_per_person), changes.get("min_headcount", p.min_headcount))
    for k, v in changes.items():
        setattr(p, k, v)
    db.commit()
    db.refresh(p)
    return p

def delete_package(db: Session, package_id: str) -> None:
    p = db.get(Package, package_id)
    if not p:
        raise LookupError("package not found")
    db.delete(p)
    db.commit()

def ensure_default_packages(db: Session) -> int:
    created = 0
    for data in DEFAULT_PACKAGES:
        if not db.get(Package, data["id"]):
            db.add(Package(**data))
            created += 1
    if created:
        db.commit()
    return created
