from typing import Optional

from pydantic import EmailStr

from voicepos.schemas.base import CamelModel, UtcDateTime


class UserCreate(CamelModel):
    # Strength rules are checked in the route against settings
    email: EmailStr
    password: str
    name: Optional[str] = None


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class UserResponse(CamelModel):
    id: int
    email: str
    name: Optional[str] = None
    role: str
    created_at: Optional[UtcDateTime] = None


class Token(CamelModel):
    access_token: str
    token_type: str = "bearer"
