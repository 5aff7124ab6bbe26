from sqlalchemy.orm import Session
from ckforest.models.setting import Setting

DEFAULT_GENERAL_SETTINGS = {
    "contact_email": "",
    "phone_number": "",
    "physical_address": "",
    "deposit_instructions": "",
}

# logo_data holds an inline data: URL; logo_url points at a hosted image
DEFAULT_LOGO_SETTINGS = {
    "logo_url": "",
    "logo_data": "",
}

def _read(db: Session, defaults: dict) -> dict:
    out = defaults.copy()
    rows = db.query(Setting).filter(Setting.key.in_(list(defaults))).all()
    for s in rows:
        if s.str_value is not None:
            out[s.key] = s.str_value
    return out

def _write(db: Session, defaults: dict, changes: dict) -> dict:
    unknown = set(changes) - set(defaults)
    if unknown:
        raise ValueError(f"unknown settings: {', '.join(sorted(unknown))}")
    for key, value in changes.items():
        if value is None:
            continue
        s = db.get(Setting, key)
        if not s:
            db.add(Setting(key=key, str_value=str(value)))
        else:
            s.str_value = str(value)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    return _read(db, defaults)

def get_general_settings(db: Session) -> dict:
    return _read(db, DEFAULT_GENERAL_SETTINGS)

def update_general_settings(db: Session, changes: dict) -> dict:
    return _write(db, DEFAULT_GENERAL_SETTINGS, changes)

def get_logo_settings(db: Session) -> dict:
    return _read(db, DEFAULT_LOGO_SETTINGS)

def update_logo_settings(db: Session, changes: dict) -> dict:
    return _write(db, DEFAULT_LOGO_SETTINGS, changes)

def get_deposit_instructions(db: Session) -> str:
    s = db.get(Setting, "deposit_instructions")
    return s.str_value if s and s.str_value else ""
