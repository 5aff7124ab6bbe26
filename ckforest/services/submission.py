"""Booking submission gate.

One gate per booking attempt. It owns the draft, derives which form
affordances are unlocked, and turns a complete draft plus receipt into a
persisted booking: upload the receipt, then create the record with the
resulting URL. Validation failures are returned, never raised, and never
touch the collaborators.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from ckforest.services.pricing import AddonSelection, PriceQuote, compute_quote

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to create booking. Please try again."


class SubmissionState(str, Enum):
    EDITING = "editing"
    READY_TO_UPLOAD = "ready_to_upload"
    RECEIPT_ATTACHED = "receipt_attached"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    FAILED = "failed"


class SubmissionError(Exception):
    code = "submission_error"
    message = GENERIC_FAILURE_MESSAGE

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class MissingPackage(SubmissionError):
    code = "missing_package"
    message = "A package must be selected."


class MissingContactDetails(SubmissionError):
    code = "missing_contact_details"

    def __init__(self, fields: list[str]):
        self.fields = list(fields)
        super().__init__(f"Please fill in: {', '.join(self.fields)}.")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "fields": self.fields}


class MissingCheckinDate(SubmissionError):
    code = "missing_checkin_date"
    message = "Please select a check-in date."


class MissingReceipt(SubmissionError):
    code = "missing_receipt"
    message = "Please upload a deposit receipt to complete the booking."


class HeadcountBelowMinimum(SubmissionError):
    code = "headcount_below_minimum"

    def __init__(self, required: int, actual: int):
        self.required = required
        self.actual = actual
        super().__init__(f"A minimum of {required} adults are required for this package.")

    def to_dict(self) -> dict:
        return {**super().to_dict(), "required": self.required, "actual": self.actual}


class UploadFailed(SubmissionError):
    code = "upload_failed"


class PersistenceFailed(SubmissionError):
    code = "persistence_failed"


class DraftLocked(SubmissionError):
    code = "draft_locked"
    message = "Remove the attached receipt before changing contact details, date or guest counts."


class SubmissionInProgress(SubmissionError):
    code = "submission_in_progress"
    message = "This booking is already being submitted."


class AlreadySubmitted(SubmissionError):
    code = "already_submitted"
    message = "This booking has already been submitted."


VALIDATION_ERRORS = (MissingPackage, MissingContactDetails, MissingCheckinDate, MissingReceipt, HeadcountBelowMinimum)
COLLABORATOR_ERRORS = (UploadFailed, PersistenceFailed)


@dataclass(frozen=True)
class ReceiptBlob:
    filename: str
    content_type: str
    data: bytes


@dataclass
class BookingDraft:
    full_name: str = ""
    email: str = ""
    phone: str = ""
    checkin_date: Optional[date] = None
    adults: Any = "0"
    children: Any = "0"
    addons: AddonSelection = field(default_factory=AddonSelection)
    nature_preference: str = ""
    receipt: Optional[ReceiptBlob] = None

    def missing_contact_fields(self) -> list[str]:
        labels = (("full_name", "full name"), ("email", "email"), ("phone", "phone"))
        return [label for name, label in labels if not (getattr(self, name) or "").strip()]

    def is_ready_for_upload(self) -> bool:
        return not self.missing_contact_fields() and self.checkin_date is not None


ReceiptUploader = Callable[[ReceiptBlob], Awaitable[str]]
BookingCreator = Callable[[dict], Awaitable[Any]]


@dataclass
class SubmissionResult:
    state: SubmissionState
    booking_id: Optional[str] = None
    receipt_url: Optional[str] = None
    quote: Optional[PriceQuote] = None
    error: Optional[SubmissionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.state == SubmissionState.SUBMITTED


def build_booking_record(package, draft: BookingDraft, quote: PriceQuote, receipt_url: str) -> dict:
    """Record handed to the booking store. Only the quote's numbers are copied."""
    return {
        "package_id": package.id,
        "package_name": package.name,
        "checkin_date": draft.checkin_date.isoformat(),
        "full_name": draft.full_name.strip(),
        "email": draft.email.strip(),
        "phone": draft.phone.strip(),
        "adults": quote.adults,
        "children": quote.children,
        "headcount_total": quote.headcount_total,
        "favorite_nature_thing": draft.nature_preference or "",
        "wants_meals": draft.addons.meals,
        "wants_transportation": draft.addons.transportation,
        "wants_tour_guide": draft.addons.tour_guide,
        "price_per_person": int(package.price_per_person),
        "subtotal": quote.subtotal,
        "deposit_due": quote.deposit_due,
        "receipt_url": receipt_url,
        "status": "pending_deposit",
    }


def _record_id(created) -> str:
    if isinstance(created, dict):
        return str(created["id"])
    return str(created.id)


class BookingSubmissionGate:
    """Drives one booking attempt from empty draft to persisted record."""

    LOCKED_FIELDS = ("full_name", "email", "phone", "checkin_date", "adults", "children")
    EDITABLE_FIELDS = LOCKED_FIELDS + ("addons", "nature_preference")

    def __init__(
        self,
        package,
        upload_receipt: ReceiptUploader,
        create_booking: BookingCreator,
        *,
        draft: BookingDraft | None = None,
        timeout: float | None = None,
    ):
        self.package = package
        self._upload_receipt = upload_receipt
        self._create_booking = create_booking
        self.timeout = timeout
        if draft is None:
            # Adults start at the package minimum
            draft = BookingDraft(adults=str(package.min_headcount) if package is not None else "0")
        self.draft = draft
        self._phase: SubmissionState | None = None
        self.booking_id: str | None = None
        self.last_error: SubmissionError | None = None

    @property
    def state(self) -> SubmissionState:
        if self._phase is not None:
            return self._phase
        if not self.draft.is_ready_for_upload():
            return SubmissionState.EDITING
        if self.draft.receipt is not None:
            return SubmissionState.RECEIPT_ATTACHED
        return SubmissionState.READY_TO_UPLOAD

    @property
    def is_locked(self) -> bool:
        """Contact, date and guest counts are frozen while a receipt is attached."""
        return self.draft.receipt is not None and self.draft.is_ready_for_upload()

    @property
    def can_upload(self) -> bool:
        return self.state == SubmissionState.READY_TO_UPLOAD

    @property
    def can_submit(self) -> bool:
        return self.state in (SubmissionState.RECEIPT_ATTACHED, SubmissionState.FAILED)

    def quote(self) -> PriceQuote | None:
        if self.package is None:
            return None
        return compute_quote(self.package, self.draft.adults, self.draft.children)

    def _ensure_mutable(self) -> None:
        if self._phase == SubmissionState.SUBMITTING:
            raise SubmissionInProgress()
        if self._phase == SubmissionState.SUBMITTED:
            raise AlreadySubmitted()

    def update(self, **changes) -> BookingDraft:
        self._ensure_mutable()
        unknown = set(changes) - set(self.EDITABLE_FIELDS)
        if unknown:
            raise TypeError(f"unknown draft fields: {', '.join(sorted(unknown))}")
        if self.is_locked and any(name in self.LOCKED_FIELDS for name in changes):
            raise DraftLocked()
        self.draft = replace(self.draft, **changes)
        return self.draft

    def attach_receipt(self, receipt: ReceiptBlob) -> SubmissionState:
        self._ensure_mutable()
        self.draft = replace(self.draft, receipt=receipt)
        logger.debug("receipt %s attached, state=%s", receipt.filename, self.state.value)
        return self.state

    def detach_receipt(self) -> SubmissionState:
        self._ensure_mutable()
        self.draft = replace(self.draft, receipt=None)
        self._phase = None
        return self.state

    def validate(self) -> SubmissionError | None:
        """First failing precondition for submit, in the order the form reports them."""
        if self.package is None:
            return MissingPackage()
        if self.draft.checkin_date is None:
            return MissingCheckinDate()
        missing = self.draft.missing_contact_fields()
        if missing:
            return MissingContactDetails(missing)
        if self.draft.receipt is None:
            return MissingReceipt()
        quote = self.quote()
        if not quote.is_eligible:
            return HeadcountBelowMinimum(int(self.package.min_headcount), quote.adults)
        return None

    async def _call(self, coro, timeout: float | None):
        if timeout is None:
            return await coro
        return await asyncio.wait_for(coro, timeout)

    async def _call_to_completion(self, coro, timeout: float | None):
        """Like _call, but past the timeout the call is still awaited and its real outcome reported."""
        task = asyncio.ensure_future(coro)
        if timeout is None:
            return await task
        try:
            return await asyncio.wait_for(asyncio.shield(task), timeout)
        except asyncio.TimeoutError:
            logger.warning("booking create exceeded %.1fs, waiting for its outcome", timeout)
            return await task

    async def submit(self, timeout: float | None = None) -> SubmissionResult:
        if self._phase == SubmissionState.SUBMITTING:
            return SubmissionResult(state=self.state, error=SubmissionInProgress())
        if self._phase == SubmissionState.SUBMITTED:
            return SubmissionResult(state=self.state, booking_id=self.booking_id, error=AlreadySubmitted())

        error = self.validate()
        if error is not None:
            logger.info("booking submit refused: %s", error.code)
            self.last_error = error
            return SubmissionResult(state=self.state, quote=self.quote(), error=error)

        timeout = self.timeout if timeout is None else timeout
        quote = self.quote()
        self._phase = SubmissionState.SUBMITTING
        self.last_error = None
        logger.debug("submitting booking for package %s", self.package.id)

        try:
            receipt_url = await self._call(self._upload_receipt(self.draft.receipt), timeout)
        except Exception:
            logger.warning("receipt upload failed for package %s", self.package.id, exc_info=True)
            return self._fail(UploadFailed(), quote)

        record = build_booking_record(self.package, self.draft, quote, receipt_url)
        try:
            created = await self._call_to_completion(self._create_booking(record), timeout)
            booking_id = _record_id(created)
        except Exception:
            logger.warning("booking create failed for package %s", self.package.id, exc_info=True)
            return self._fail(PersistenceFailed(), quote, receipt_url=receipt_url)

        self._phase = SubmissionState.SUBMITTED
        self.booking_id = booking_id
        logger.info("booking %s submitted for package %s", booking_id, self.package.id)
        return SubmissionResult(state=self._phase, booking_id=booking_id, receipt_url=receipt_url, quote=quote)

    def _fail(self, error: SubmissionError, quote: PriceQuote, receipt_url: str | None = None) -> SubmissionResult:
        self._phase = SubmissionState.FAILED
        self.last_error = error
        return SubmissionResult(state=self._phase, receipt_url=receipt_url, quote=quote, error=error)
