import asyncio
from datetime import date
from types import SimpleNamespace

import pytest

from ckforest.services.pricing import AddonSelection
from ckforest.services.submission import (
    AlreadySubmitted,
    BookingDraft,
    BookingSubmissionGate,
    DraftLocked,
    HeadcountBelowMinimum,
    MissingCheckinDate,
    MissingContactDetails,
    MissingPackage,
    MissingReceipt,
    PersistenceFailed,
    ReceiptBlob,
    SubmissionInProgress,
    SubmissionState,
    UploadFailed,
)

PACKAGE = SimpleNamespace(id="day_stay", name="Day Stay", price_per_person=5000, min_headcount=10)
RECEIPT = ReceiptBlob(filename="receipt.jpg", content_type="image/jpeg", data=b"\xff\xd8jpeg")


class FakeBackend:
    """Records collaborator calls; failures are switched on per test."""

    def __init__(self):
        self.uploads = []
        self.records = []
        self.fail_upload = False
        self.fail_create = False
        self.upload_delay = 0.0
        self.create_delay = 0.0

    async def upload(self, receipt):
        if self.upload_delay:
            await asyncio.sleep(self.upload_delay)
        self.uploads.append(receipt)
        if self.fail_upload:
            raise OSError("bucket unavailable")
        return f"https://files.test/uploads/{len(self.uploads)}-{receipt.filename}"

    async def create(self, record):
        if self.create_delay:
            await asyncio.sleep(self.create_delay)
        self.records.append(record)
        if self.fail_create:
            raise RuntimeError("insert failed")
        return {"id": f"bk-{len(self.records)}", **record}

    @property
    def calls(self):
        return len(self.uploads) + len(self.records)


@pytest.fixture
def backend():
    return FakeBackend()


def ready_gate(backend, **overrides):
    draft = BookingDraft(
        full_name="Asha Persaud",
        email="asha@example.gy",
        phone="+592 600 1234",
        checkin_date=date(2026, 11, 14),
        adults="10",
        children="2",
        addons=AddonSelection(meals=True),
        nature_preference="Birdsong",
    )
    gate = BookingSubmissionGate(PACKAGE, backend.upload, backend.create, draft=draft)
    if overrides:
        gate.update(**overrides)
    return gate


def test_new_gate_starts_editing_with_minimum_adults(backend):
    gate = BookingSubmissionGate(PACKAGE, backend.upload, backend.create)
    assert gate.state == SubmissionState.EDITING
    assert gate.draft.adults == "10"
    assert gate.quote().is_eligible


def test_ready_to_upload_needs_contact_and_date_but_not_headcount(backend):
    gate = BookingSubmissionGate(PACKAGE, backend.upload, backend.create)
    gate.update(full_name="Asha", email="a@example.gy", phone="600")
    assert gate.state == SubmissionState.EDITING
    gate.update(checkin_date=date(2026, 11, 14), adults="2")
    assert gate.state == SubmissionState.READY_TO_UPLOAD
    assert gate.can_upload


def test_blank_contact_fields_do_not_count(backend):
    gate = ready_gate(backend, phone="   ")
    assert gate.state == SubmissionState.EDITING


def test_attaching_receipt_locks_core_fields(backend):
    gate = ready_gate(backend)
    assert gate.attach_receipt(RECEIPT) == SubmissionState.RECEIPT_ATTACHED
    assert gate.is_locked
    for field, value in (("email", "x@y.z"), ("checkin_date", date(2026, 12, 1)), ("adults", "12")):
        with pytest.raises(DraftLocked):
            gate.update(**{field: value})
    gate.update(nature_preference="Waterfalls")
    assert gate.draft.nature_preference == "Waterfalls"


def test_detaching_receipt_reopens_form(backend):
    gate = ready_gate(backend)
    gate.attach_receipt(RECEIPT)
    assert gate.detach_receipt() == SubmissionState.READY_TO_UPLOAD
    gate.update(adults="12")
    assert gate.quote().adults == 12


def test_unknown_field_is_rejected(backend):
    gate = ready_gate(backend)
    with pytest.raises(TypeError):
        gate.update(price_per_person=1)


@pytest.mark.anyio
async def test_successful_submission(backend):
    gate = ready_gate(backend)
    gate.attach_receipt(RECEIPT)

    result = await gate.submit()

    assert result.ok
    assert result.state == SubmissionState.SUBMITTED
    assert result.booking_id == "bk-1"
    assert gate.booking_id == "bk-1"
    assert len(backend.uploads) == 1 and len(backend.records) == 1

    record = backend.records[0]
    assert record["receipt_url"] == result.receipt_url
    assert record["checkin_date"] == "2026-11-14"
    assert record["adults"] == 10 and record["children"] == 2
    assert record["headcount_total"] == 12
    assert record["price_per_person"] == 5000
    assert record["subtotal"] == 50000
    assert record["deposit_due"] == 25000
    assert record["wants_meals"] is True and record["wants_tour_guide"] is False
    assert record["package_id"] == "day_stay" and record["package_name"] == "Day Stay"
    assert record["favorite_nature_thing"] == "Birdsong"


@pytest.mark.anyio
async def test_submitted_gate_refuses_second_submit(backend):
    gate = ready_gate(backend)
    gate.attach_receipt(RECEIPT)
    await gate.submit()

    again = await gate.submit()

    assert isinstance(again.error, AlreadySubmitted)
    assert again.booking_id == "bk-1"
    assert backend.calls == 2
    with pytest.raises(AlreadySubmitted):
        gate.update(nature_preference="x")


@pytest.mark.anyio
async def test_missing_package(backend):
    gate = BookingSubmissionGate(None, backend.upload, backend.create, draft=BookingDraft(receipt=RECEIPT))
    result = await gate.submit()
    assert isinstance(result.error, MissingPackage)
    assert backend.calls == 0


@pytest.mark.anyio
async def test_missing_date_refused_then_fixed(backend):
    gate = ready_gate(backend, checkin_date=None)
    gate.attach_receipt(RECEIPT)
    before = gate.draft

    result = await gate.submit()

    assert isinstance(result.error, MissingCheckinDate)
    assert backend.calls == 0
    assert gate.draft == before
    assert gate.state == SubmissionState.EDITING

    gate.update(checkin_date=date(2026, 11, 14))
    assert (await gate.submit()).ok


@pytest.mark.anyio
async def test_missing_receipt_refused_then_fixed(backend):
    gate = ready_gate(backend)
    before = gate.draft

    result = await gate.submit()

    assert isinstance(result.error, MissingReceipt)
    assert backend.calls == 0
    assert gate.draft == before

    gate.attach_receipt(RECEIPT)
    assert (await gate.submit()).ok


@pytest.mark.anyio
async def test_missing_contact_details(backend):
    gate = ready_gate(backend, email="", phone="")
    gate.attach_receipt(RECEIPT)
    result = await gate.submit()
    assert isinstance(result.error, MissingContactDetails)
    assert result.error.fields == ["email", "phone"]
    assert backend.calls == 0


@pytest.mark.anyio
async def test_headcount_below_minimum(backend):
    gate = ready_gate(backend, adults="9")
    gate.attach_receipt(RECEIPT)
    before = gate.draft

    result = await gate.submit()

    assert isinstance(result.error, HeadcountBelowMinimum)
    assert (result.error.required, result.error.actual) == (10, 9)
    assert result.error.to_dict()["required"] == 10
    assert "minimum of 10 adults" in result.error.message
    assert backend.calls == 0
    assert gate.draft == before
    assert gate.state == SubmissionState.RECEIPT_ATTACHED

    gate.detach_receipt()
    gate.update(adults="10")
    gate.attach_receipt(RECEIPT)
    assert (await gate.submit()).ok


@pytest.mark.anyio
async def test_upload_failure_keeps_draft(backend):
    backend.fail_upload = True
    gate = ready_gate(backend)
    gate.attach_receipt(RECEIPT)
    before = gate.draft

    result = await gate.submit()

    assert isinstance(result.error, UploadFailed)
    assert result.state == SubmissionState.FAILED
    assert backend.records == []
    assert gate.draft == before
    assert gate.can_submit


@pytest.mark.anyio
async def test_create_failure_then_retry_reuploads(backend):
    backend.fail_create = True
    gate = ready_gate(backend)
    gate.attach_receipt(RECEIPT)
    before = gate.draft

    result = await gate.submit()

    assert isinstance(result.error, PersistenceFailed)
    assert result.state == SubmissionState.FAILED
    assert gate.draft == before
    assert gate.draft.receipt is RECEIPT

    backend.fail_create = False
    retry = await gate.submit()

    assert retry.ok
    assert retry.booking_id == "bk-2"
    # whole sequence re-runs, so the receipt is uploaded twice
    assert len(backend.uploads) == 2


@pytest.mark.anyio
async def test_upload_timeout_is_upload_failure(backend):
    backend.upload_delay = 1.0
    gate = ready_gate(backend)
    gate.attach_receipt(RECEIPT)

    result = await gate.submit(timeout=0.01)

    assert isinstance(result.error, UploadFailed)
    assert backend.records == []


@pytest.mark.anyio
async def test_slow_create_reports_its_real_outcome(backend):
    backend.create_delay = 0.1
    gate = ready_gate(backend)
    gate.attach_receipt(RECEIPT)

    result = await gate.submit(timeout=0.01)

    assert result.ok
    assert gate.state == SubmissionState.SUBMITTED
    assert len(backend.records) == 1
    # a retry cannot create a second booking
    assert isinstance((await gate.submit()).error, AlreadySubmitted)
    assert len(backend.records) == 1


@pytest.mark.anyio
async def test_slow_create_that_fails_is_persistence_failure(backend):
    backend.create_delay = 0.1
    backend.fail_create = True
    gate = ready_gate(backend)
    gate.attach_receipt(RECEIPT)

    result = await gate.submit(timeout=0.01)

    assert isinstance(result.error, PersistenceFailed)
    assert gate.state == SubmissionState.FAILED


@pytest.mark.anyio
async def test_concurrent_submit_is_refused(backend):
    backend.upload_delay = 0.05
    gate = ready_gate(backend)
    gate.attach_receipt(RECEIPT)

    first, second = await asyncio.gather(gate.submit(), gate.submit())

    assert first.ok
    assert isinstance(second.error, SubmissionInProgress)
    assert len(backend.records) == 1
