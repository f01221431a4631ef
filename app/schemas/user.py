from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional
from datetime import datetime

def _clean_phone(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.replace(" ", "").replace("-", "")
    if not v:
        return None
    if not v.lstrip("+").isdigit():
        raise ValueError("Phone number may only contain digits")
    return v

class UserBase(BaseModel):
    name: Optional[str] = None
    phone_number: Optional[str] = None

    @field_validator("phone_number")
    def phone_must_be_digits(cls, v):
        return _clean_phone(v)

class UserCreate(UserBase):
    email: str
    password: str
    name: str

    @field_validator("email")
    def normalize_email(cls, v):
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v

    @field_validator("password")
    def password_min_length(cls, v):
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v

    @field_validator("name")
    def name_must_not_be_empty(cls, v):
        if not v or not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

class UserUpdate(UserBase):
    pass

class UserResponse(UserBase):
    id: int
    email: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class UserLogin(BaseModel):
    email: str
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str
