import hmac

from fastapi import Header, HTTPException

from ckforest.core.config import settings


def require_management(x_management_key: str | None = Header(default=None)) -> None:
    """Management console guard. Identity itself lives with the upstream provider."""
    if not settings.MANAGEMENT_API_KEY:
        raise HTTPException(status_code=503, detail="Management console is not configured")
    if not x_management_key:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if not hmac.compare_digest(x_management_key.encode(), settings.MANAGEMENT_API_KEY.encode()):
        raise HTTPException(status_code=403, detail="Forbidden")
