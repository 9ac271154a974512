from pydantic import BaseModel, EmailStr
from typing import Optional


class SignUpRequest(BaseModel):
    uid: str
    name: str
    email: EmailStr


class TokenData(BaseModel):
    user_id: Optional[str] = None
    email: Optional[str] = None


class User(BaseModel):
    id: str
    name: str
    email: str
