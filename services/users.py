from typing import Optional

from core.logging_config import get_logger
from models.auth import SignUpRequest, User
from services.document_store import DocumentStore

logger = get_logger(__name__)

USERS_COLLECTION = "users"


async def sign_up(store: DocumentStore, request: SignUpRequest) -> dict:
    """Create the user document for an identity-provider uid, unless it already exists."""
    existing = await store.get(USERS_COLLECTION, request.uid)
    if existing.exists:
        return {"success": False, "message": "User already exists. Please sign in."}

    await store.set(USERS_COLLECTION, request.uid, {"name": request.name, "email": request.email})
    logger.info("Created user %s", request.uid)
    return {"success": True, "message": "Account created successfully. Please sign in."}


async def get_user(store: DocumentStore, user_id: str) -> Optional[User]:
    snapshot = await store.get(USERS_COLLECTION, user_id)
    if not snapshot.exists:
        return None
    return User.model_validate(snapshot.to_dict())
