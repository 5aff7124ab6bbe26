from pydantic import BaseModel
from typing import Optional

class GeneralSettingsOut(BaseModel):
    contact_email: str = ""
    phone_number: str = ""
    physical_address: str = ""
    deposit_instructions: str = ""

class GeneralSettingsPatch(BaseModel):
    contact_email: Optional[str] = None
    phone_number: Optional[str] = None
    physical_address: Optional[str] = None
    deposit_instructions: Optional[str] = None

class LogoSettingsOut(BaseModel):
    logo_url: str = ""
    logo_data: str = ""

class LogoSettingsPatch(BaseModel):
    logo_url: Optional[str] = None
    logo_data: Optional[str] = None
