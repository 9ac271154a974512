from typing import Optional
import jwt
from core.config import JWT_SECRET_KEY, JWT_ALGORITHM
from models.auth import TokenData


def decode_access_token(token: str) -> Optional[TokenData]:
    """Verify a bearer token issued by the sign-in service and read its identity claims."""
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None

    user_id = payload.get("user_id")
    if user_id is None:
        return None
    return TokenData(user_id=str(user_id), email=payload.get("email"))
