from pydantic import BaseModel, Field
from typing import Optional, Union

class AddonsIn(BaseModel):
    meals: bool = False
    transportation: bool = False
    tourGuide: bool = False

class QuoteRequest(BaseModel):
    packageId: str
    # raw form values; unparseable counts are treated as 0
    adults: Union[int, float, str, None] = 0
    children: Union[int, float, str, None] = 0
    addons: AddonsIn = Field(default_factory=AddonsIn)

class QuoteOut(BaseModel):
    packageId: str
    currency: str = "GYD"
    adults: int
    children: int
    headcountTotal: int
    pricePerPerson: int
    minHeadcount: int
    subtotal: int
    depositDue: float
    isEligible: bool
    addonMessage: str = ""

class BookingSubmitOut(BaseModel):
    id: str
    reference: str
    status: str = "pending_deposit"
    receiptUrl: Optional[str] = None
    quote: QuoteOut
    depositInstructions: str = ""

class BookingOut(BaseModel):
    id: str
    createdAt: str
    status: str
    packageId: str
    package: str
    checkinDate: str
    fullName: str
    email: str
    phone: str
    adults: int
    children: int
    headcountTotal: int
    favoriteNatureThing: str = ""
    wantsMeals: bool = False
    wantsTransportation: bool = False
    wantsTourGuide: bool = False
    pricePerPerson: int
    subtotal: int
    depositDue: float
    depositPaidAmount: Optional[float] = None
    receiptUrl: Optional[str] = None

class BookingStatusIn(BaseModel):
    status: str

def booking_out(b) -> BookingOut:
    return BookingOut(
        id=b.id,
        createdAt=b.created_at.isoformat() if b.created_at else "",
        status=b.status,
        packageId=b.package_id,
        package=b.package_name or "",
        checkinDate=b.checkin_date,
        fullName=b.full_name,
        email=b.email,
        phone=b.phone,
        adults=b.adults,
        children=b.children,
        headcountTotal=b.headcount_total,
        favoriteNatureThing=b.favorite_nature_thing or "",
        wantsMeals=bool(b.wants_meals),
        wantsTransportation=bool(b.wants_transportation),
        wantsTourGuide=bool(b.wants_tour_guide),
        pricePerPerson=b.price_per_person,
        subtotal=b.subtotal,
        depositDue=b.deposit_due,
        depositPaidAmount=b.deposit_paid_amount,
        receiptUrl=b.receipt_url,
    )
