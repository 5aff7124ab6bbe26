from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from ckforest.db.session import get_db
from ckforest.core.config import settings
from ckforest.schemas.booking import QuoteRequest, QuoteOut
from ckforest.schemas.package import PackageOut, package_out
from ckforest.schemas.settings import GeneralSettingsOut, LogoSettingsOut
from ckforest.services.package_service import list_packages, get_package
from ckforest.services.pricing import AddonSelection, PriceQuote, addon_message, compute_quote
from ckforest.services.settings_service import get_general_settings, get_logo_settings

router = APIRouter(tags=["public"])


def quote_out(package, quote: PriceQuote, addons: AddonSelection) -> QuoteOut:
    return QuoteOut(
        packageId=package.id,
        currency=settings.CURRENCY,
        adults=quote.adults,
        children=quote.children,
        headcountTotal=quote.headcount_total,
        pricePerPerson=package.price_per_person,
        minHeadcount=package.min_headcount,
        subtotal=quote.subtotal,
        depositDue=quote.deposit_due,
        isEligible=quote.is_eligible,
        addonMessage=addon_message(addons),
    )


@router.get("/public/packages", response_model=list[PackageOut])
def public_packages(db: Session = Depends(get_db)):
    """Packages currently offered, oldest first."""
    return [package_out(p) for p in list_packages(db)]


@router.get("/public/packages/{package_id}", response_model=PackageOut)
def public_package(package_id: str, db: Session = Depends(get_db)):
    p = get_package(db, package_id)
    if not p:
        raise HTTPException(status_code=404, detail="Package not found")
    return package_out(p)


@router.post("/public/quote", response_model=QuoteOut)
def public_quote(body: QuoteRequest, db: Session = Depends(get_db)):
    """Live price for the booking form; called whenever package or guest counts change."""
    p = get_package(db, body.packageId)
    if not p:
        raise HTTPException(status_code=404, detail="Package not found")
    addons = AddonSelection(
        meals=body.addons.meals,
        transportation=body.addons.transportation,
        tour_guide=body.addons.tourGuide,
    )
    return quote_out(p, compute_quote(p, body.adults, body.children), addons)


@router.get("/public/settings", response_model=GeneralSettingsOut)
def public_settings(db: Session = Depends(get_db)):
    return GeneralSettingsOut(**get_general_settings(db))


@router.get("/public/settings/logo", response_model=LogoSettingsOut)
def public_logo(db: Session = Depends(get_db)):
    return LogoSettingsOut(**get_logo_settings(db))
