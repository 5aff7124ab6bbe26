from __future__ import annotations

import os
import re
import uuid

from ckforest.core.config import settings

RECEIPT_URL_PREFIX = "/receipts"

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_name(filename: str) -> str:
    name = _UNSAFE.sub("_", os.path.basename(filename or "")).strip("._")
    return name or "receipt"


def make_object_key(filename: str) -> str:
    return f"uploads/{uuid.uuid4()}-{_safe_name(filename)}"


def upload_receipt(*, filename: str, content_type: str, data: bytes) -> str:
    """Store a receipt and return a publicly retrievable URL."""
    if not data:
        raise ValueError("receipt is empty")
    object_key = make_object_key(filename)

    if settings.GCS_BUCKET_NAME:
        try:
            from google.cloud import storage  # type: ignore
        except ImportError as e:
            raise RuntimeError("google-cloud-storage is not installed. Install the gcs extra and retry") from e

        client = storage.Client()
        bucket = client.bucket(settings.GCS_BUCKET_NAME)
        blob = bucket.blob(object_key)
        blob.cache_control = "public, max-age=3600"
        blob.upload_from_string(data, content_type=content_type or "application/octet-stream")
        return blob.public_url

    # local
    base = settings.RECEIPT_LOCAL_DIR or "./data/receipts"
    path = os.path.join(base, object_key)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "xb") as f:
        f.write(data)
    return f"{settings.API_PUBLIC_URL.rstrip('/')}{RECEIPT_URL_PREFIX}/{object_key}"
