from pydantic import BaseModel, ConfigDict, Field
from datetime import date, datetime
from typing import Literal, Optional

EMAIL_REGX = r"^[^@]+@[^@]+\.[^@]+$"


# Schema for signup
class UserCreate(BaseModel):
    email: str = Field(..., pattern=EMAIL_REGX)
    password: str = Field(..., min_length=6)
    name: Optional[str] = None
    role: Literal["client", "trainer", "gym_owner"] = "client"

# Schema for login (JSON body)
class UserLogin(BaseModel):
    email: str = Field(..., pattern=EMAIL_REGX)
    password: str

# Schema for returning user (without password)
class UserResponse(BaseModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str

    model_config = ConfigDict(from_attributes=True)

class TokenResponse(BaseModel):
    user: UserResponse
    token: str
    token_type: str = "bearer"


# --- Trainer-managed clients ---

class ClientCreate(BaseModel):
    name: str
    email: str = Field(..., pattern=EMAIL_REGX)
    phone: Optional[str] = None
    age: Optional[int] = Field(None, ge=1, le=120)
    gender: Optional[str] = None
    goal: Optional[str] = None
    sessions: int = Field(0, ge=0)
    validity: Optional[int] = Field(None, ge=0, description="Validity in days from today")
    password: Optional[str] = None
    profile_image_url: Optional[str] = None

class ClientResponse(BaseModel):
    id: int
    name: Optional[str] = None
    email: str
    phone: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    dob: Optional[date] = None
    goal: Optional[str] = None
    profile_image_url: Optional[str] = None
    total_sessions: int
    completed_sessions: int
    validity_expires_at: Optional[datetime] = None
    status: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class SessionCountResponse(BaseModel):
    message: str
    completed_sessions: int
    total_sessions: int

class SessionRenewRequest(BaseModel):
    sessions: int = Field(..., gt=0)
    validity: Optional[int] = Field(None, ge=0, description="Extend validity by this many days")
