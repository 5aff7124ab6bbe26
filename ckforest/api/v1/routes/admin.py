from datetime import date, datetime, timezone
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ckforest.db.session import get_db
from ckforest.api.deps import require_management
from ckforest.schemas.booking import BookingOut, BookingStatusIn, booking_out
from ckforest.schemas.package import PACKAGE_FIELD_MAP, PackageIn, PackageOut, PackagePatch, package_out
from ckforest.schemas.settings import GeneralSettingsOut, GeneralSettingsPatch, LogoSettingsOut, LogoSettingsPatch
from ckforest.services import booking_service, package_service
from ckforest.services.dashboard_service import get_booking_trends, get_dashboard_stats
from ckforest.services.settings_service import (
    get_general_settings,
    get_logo_settings,
    update_general_settings,
    update_logo_settings,
)

router = APIRouter(tags=["admin"], dependencies=[Depends(require_management)])


def _today() -> date:
    return datetime.now(timezone.utc).date()


@router.get("/admin/dashboard")
def dashboard(db: Session = Depends(get_db)):
    today = _today()
    return {
        "stats": get_dashboard_stats(db, today),
        "trends": get_booking_trends(db, today),
    }


@router.get("/admin/bookings", response_model=list[BookingOut])
def booking_queue(status: str | None = None, db: Session = Depends(get_db)):
    if status and status not in booking_service.STATUSES:
        raise HTTPException(status_code=400, detail="invalid status")
    return [booking_out(b) for b in booking_service.list_bookings(db, status=status)]


@router.patch("/admin/bookings/{booking_id}/status", response_model=BookingOut)
def change_booking_status(booking_id: str, body: BookingStatusIn, db: Session = Depends(get_db)):
    try:
        b = booking_service.set_booking_status(db, booking_id, body.status)
    except LookupError:
        raise HTTPException(status_code=404, detail="Not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return booking_out(b)


@router.get("/admin/calendar")
def booking_calendar(start: str, end: str, db: Session = Depends(get_db)):
    """Deposit-paid and confirmed bookings grouped by check-in date."""
    try:
        start_dt = date.fromisoformat(start)
        end_dt = date.fromisoformat(end)
    except ValueError:
        raise HTTPException(status_code=400, detail="start and end must be YYYY-MM-DD")
    if start_dt > end_dt or (end_dt - start_dt).days > 366:
        raise HTTPException(status_code=400, detail="Invalid date range")
    grouped = booking_service.list_calendar_bookings(db, start_dt.isoformat(), end_dt.isoformat())
    return {d: [booking_out(b).model_dump() for b in rows] for d, rows in grouped.items()}


@router.get("/admin/packages", response_model=list[PackageOut])
def admin_packages(db: Session = Depends(get_db)):
    return [package_out(p) for p in package_service.list_packages(db, include_inactive=True)]


@router.post("/admin/packages", response_model=PackageOut)
def admin_create_package(body: PackageIn, db: Session = Depends(get_db)):
    data = {PACKAGE_FIELD_MAP[k]: v for k, v in body.model_dump().items() if v is not None}
    try:
        p = package_service.create_package(db, data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return package_out(p)


@router.put("/admin/packages/{package_id}", response_model=PackageOut)
def admin_update_package(package_id: str, body: PackagePatch, db: Session = Depends(get_db)):
    changes = {PACKAGE_FIELD_MAP[k]: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    try:
        p = package_service.update_package(db, package_id, changes)
    except LookupError:
        raise HTTPException(status_code=404, detail="Package not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return package_out(p)


@router.delete("/admin/packages/{package_id}")
def admin_delete_package(package_id: str, db: Session = Depends(get_db)):
    try:
        package_service.delete_package(db, package_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Package not found")
    return {"ok": True}


@router.get("/admin/settings", response_model=GeneralSettingsOut)
def admin_get_settings(db: Session = Depends(get_db)):
    return GeneralSettingsOut(**get_general_settings(db))


@router.put("/admin/settings", response_model=GeneralSettingsOut)
def admin_update_settings(body: GeneralSettingsPatch, db: Session = Depends(get_db)):
    return GeneralSettingsOut(**update_general_settings(db, body.model_dump(exclude_unset=True)))


@router.get("/admin/settings/logo", response_model=LogoSettingsOut)
def admin_get_logo(db: Session = Depends(get_db)):
    return LogoSettingsOut(**get_logo_settings(db))


@router.put("/admin/settings/logo", response_model=LogoSettingsOut)
def admin_update_logo(body: LogoSettingsPatch, db: Session = Depends(get_db)):
    return LogoSettingsOut(**update_logo_settings(db, body.model_dump(exclude_unset=True)))
