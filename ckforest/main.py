from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from ckforest.core.config import settings
from ckforest.core.logging import configure_logging
from ckforest.api.v1.api import api_router
from ckforest.services.receipt_storage import RECEIPT_URL_PREFIX

configure_logging()

app = FastAPI(title=settings.APP_NAME)

# CORS: use CORS_ORIGINS from env in production; default to localhost for dev
_default_origins = [
    "http://127.0.0.1:5173", "http://localhost:5173",
    "http://127.0.0.1:3000", "http://localhost:3000",
]
_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()] if settings.CORS_ORIGINS else _default_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/health")
def health():
    return {"status": "ok"}


# Locally stored receipts; GCS-backed receipts carry their own public URL
if not settings.GCS_BUCKET_NAME:
    app.mount(
        RECEIPT_URL_PREFIX,
        StaticFiles(directory=settings.RECEIPT_LOCAL_DIR or "./data/receipts", check_dir=False),
        name="receipts",
    )
