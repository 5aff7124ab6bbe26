from pydantic import BaseModel, Field
from typing import Optional

class PackageIn(BaseModel):
    id: Optional[str] = None  # derived from name when omitted
    name: str
    description: str = ""
    pricePerPerson: int = Field(ge=0)
    minHeadcount: int = Field(ge=1)
    timing: str = ""
    imageUrl: str = ""
    active: bool = True

class PackagePatch(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    pricePerPerson: Optional[int] = Field(default=None, ge=0)
    minHeadcount: Optional[int] = Field(default=None, ge=1)
    timing: Optional[str] = None
    imageUrl: Optional[str] = None
    active: Optional[bool] = None

class PackageOut(BaseModel):
    id: str
    name: str
    description: str = ""
    pricePerPerson: int
    minHeadcount: int
    timing: str = ""
    imageUrl: str = ""
    active: bool = True

# camelCase API field -> model column
PACKAGE_FIELD_MAP = {
    "id": "id",
    "name": "name",
    "description": "description",
    "pricePerPerson": "price_per_person",
    "minHeadcount": "min_headcount",
    "timing": "timing",
    "imageUrl": "image_url",
    "active": "active",
}

def package_out(p) -> PackageOut:
    return PackageOut(
        id=p.id,
        name=p.name,
        description=p.description or "",
        pricePerPerson=p.price_per_person,
        minHeadcount=p.min_headcount,
        timing=p.timing or "",
        imageUrl=p.image_url or "",
        active=bool(p.active),
    )
