# schemas.py
# Defines request/response Pydantic models for validation
from pydantic import BaseModel, Field
from typing import Optional

# -------------------- USER --------------------
class SignupRequest(BaseModel):
    mobile_number: str = Field(..., min_length=1)
    name: str
    email: str
    password: str = Field(..., min_length=1)
    mpin: str = Field(..., min_length=1)

class LoginRequest(BaseModel):
    mobile_number: str
    mpin: str

class ContactOut(BaseModel):
    mobile_number: str
    name: Optional[str] = None

    class Config:
        from_attributes = True

class UserOut(ContactOut):
    # Credentials are never part of a response
    email: Optional[str] = None
    wallet_amount: float = 0.0

class SignupResponse(BaseModel):
    message: str
    user: UserOut

class LoginResponse(BaseModel):
    message: str
    user: ContactOut
    contacts: list[ContactOut]

# -------------------- REPORT --------------------
class ReportOut(BaseModel):
    """A stored report; which optional fields appear depends on the deployment variant"""
    id: int
    image_filename: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location: str = ""
    description: str = ""
    # prediction variant
    severity: Optional[str] = None
    humanitarian: Optional[str] = None
    disaster_or_not: Optional[str] = None
    urgency_level: Optional[str] = None
    # status variant
    status: Optional[str] = None

class StatusUpdate(BaseModel):
    status: str = Field(..., min_length=1)

class StatusUpdateResponse(BaseModel):
    message: str
    report: ReportOut

# -------------------- RESPONSES --------------------
class MessageResponse(BaseModel):
    message: str
