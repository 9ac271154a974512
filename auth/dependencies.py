from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from models.auth import TokenData, User
from services.dependencies import get_document_store
from services.document_store import DocumentStore
from services.users import get_user
from .utils import decode_access_token

security = HTTPBearer()


async def get_token_data(credentials: HTTPAuthorizationCredentials = Depends(security)) -> TokenData:
    token_data = decode_access_token(credentials.credentials)

    if token_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token"
        )
    return token_data


async def get_current_user(
    token_data: TokenData = Depends(get_token_data),
    store: DocumentStore = Depends(get_document_store)
) -> User:
    user = await get_user(store, token_data.user_id)

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )
    return user
