from fastapi import APIRouter, HTTPException, Depends, status
from services.dependencies import get_document_store
from services.document_store import DocumentStore
from services.users import sign_up
from models.auth import SignUpRequest, User
from auth.dependencies import get_current_user

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/signup", response_model=dict, status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignUpRequest,
    store: DocumentStore = Depends(get_document_store)
):
    """Create the profile document for a user already registered with the identity provider"""
    try:
        result = await sign_up(store, request)
        if not result["success"]:
            raise HTTPException(status_code=400, detail=result["message"])
        return result

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to create account. Please try again. ({e})")


@router.get("/me", response_model=User)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info"""
    return current_user
