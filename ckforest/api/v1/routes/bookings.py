import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ckforest.db.session import get_db
from ckforest.core.config import settings
from ckforest.api.v1.routes.public import quote_out
from ckforest.schemas.booking import BookingOut, BookingSubmitOut, booking_out
from ckforest.services import booking_service, receipt_storage
from ckforest.services.package_service import get_package
from ckforest.services.pricing import AddonSelection
from ckforest.services.settings_service import get_deposit_instructions
from ckforest.services.submission import (
    COLLABORATOR_ERRORS,
    GENERIC_FAILURE_MESSAGE,
    BookingDraft,
    BookingSubmissionGate,
    MissingPackage,
    ReceiptBlob,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


def _parse_checkin(value: Optional[str]) -> Optional[date]:
    v = (value or "").strip()
    if not v:
        return None
    try:
        return datetime.strptime(v, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=400, detail="checkinDate must be YYYY-MM-DD")


async def _read_receipt(upload: Optional[UploadFile]) -> Optional[ReceiptBlob]:
    if upload is None or not upload.filename:
        return None
    data = await upload.read()
    if not data:
        return None
    return ReceiptBlob(filename=upload.filename, content_type=upload.content_type or "application/octet-stream", data=data)


def make_gate(db: Session, package, draft: BookingDraft) -> BookingSubmissionGate:
    """Gate wired to the receipt store and the SQL booking store."""

    async def upload(receipt: ReceiptBlob) -> str:
        return await run_in_threadpool(
            receipt_storage.upload_receipt,
            filename=receipt.filename,
            content_type=receipt.content_type,
            data=receipt.data,
        )

    async def create(record: dict):
        return await run_in_threadpool(booking_service.create_booking, db, record)

    return BookingSubmissionGate(package, upload, create, draft=draft, timeout=settings.SUBMIT_TIMEOUT_SECONDS)


@router.post("/public/bookings", response_model=BookingSubmitOut)
async def submit_booking(
    packageId: str = Form(...),
    fullName: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    checkinDate: Optional[str] = Form(None),
    adults: str = Form("0"),
    children: str = Form("0"),
    favoriteNatureThing: str = Form(""),
    meals: bool = Form(False),
    transportation: bool = Form(False),
    tourGuide: bool = Form(False),
    receipt: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    package = await run_in_threadpool(get_package, db, packageId)
    draft = BookingDraft(
        full_name=fullName,
        email=email,
        phone=phone,
        checkin_date=_parse_checkin(checkinDate),
        adults=adults,
        children=children,
        addons=AddonSelection(meals=meals, transportation=transportation, tour_guide=tourGuide),
        nature_preference=favoriteNatureThing,
        receipt=await _read_receipt(receipt),
    )
    gate = make_gate(db, package, draft)
    result = await gate.submit()

    if isinstance(result.error, MissingPackage):
        raise HTTPException(status_code=404, detail=result.error.to_dict())
    if isinstance(result.error, COLLABORATOR_ERRORS):
        raise HTTPException(status_code=502, detail={"code": result.error.code, "message": GENERIC_FAILURE_MESSAGE})
    if result.error is not None:
        raise HTTPException(status_code=400, detail=result.error.to_dict())

    instructions = await run_in_threadpool(get_deposit_instructions, db)
    return BookingSubmitOut(
        id=result.booking_id,
        reference=f"BK-{result.booking_id}",
        receiptUrl=result.receipt_url,
        quote=quote_out(package, result.quote, draft.addons),
        depositInstructions=instructions,
    )


@router.get("/public/bookings", response_model=list[BookingOut])
def my_bookings(email: str, db: Session = Depends(get_db)):
    """Bookings made with this email, newest first."""
    return [booking_out(b) for b in booking_service.list_bookings_for_email(db, email)]


@router.post("/public/bookings/{booking_id}/deposit-receipt", response_model=BookingOut)
async def upload_deposit_receipt(booking_id: str, receipt: UploadFile = File(...), db: Session = Depends(get_db)):
    b = await run_in_threadpool(booking_service.get_booking, db, booking_id)
    if not b:
        raise HTTPException(status_code=404, detail="Not found")
    if b.status != "pending_deposit":
        raise HTTPException(status_code=409, detail="Deposit already recorded for this booking")
    blob = await _read_receipt(receipt)
    if blob is None:
        raise HTTPException(status_code=400, detail="receipt required")

    try:
        url = await run_in_threadpool(
            receipt_storage.upload_receipt,
            filename=blob.filename,
            content_type=blob.content_type,
            data=blob.data,
        )
    except Exception:
        logger.warning("deposit receipt upload failed for booking %s", booking_id, exc_info=True)
        raise HTTPException(status_code=502, detail="Failed to upload receipt. Please try again.")

    try:
        b = await run_in_threadpool(booking_service.record_deposit_receipt, db, booking_id, url)
    except LookupError:
        raise HTTPException(status_code=404, detail="Not found")
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return booking_out(b)
