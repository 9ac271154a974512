from fastapi import APIRouter, HTTPException, Depends, Query, Request
from typing import List
from core.config import FEEDBACK_RATE_LIMIT
from core.logging_config import get_logger
from services.dependencies import get_document_store, get_completion_client
from services.document_store import DocumentStore
from services.completion import StructuredCompletionClient
from services.feedback_ai import FEEDBACK_COLLECTION, create_feedback
from services.interview_queries import (
    DEFAULT_FEED_LIMIT, get_interview, get_feedback, get_latest_interviews, get_user_interviews
)
from services.rate_limiter import limiter
from services.tech_icons import get_tech_logos
from models.auth import User
from models.interview import CreateFeedbackRequest, Feedback, FeedbackResult, Interview
from auth.dependencies import get_current_user

logger = get_logger(__name__)

router = APIRouter(prefix="/api/interviews", tags=["Interview"])


@router.get("/latest", response_model=List[Interview])
async def get_latest_interview_feed(
    limit: int = Query(DEFAULT_FEED_LIMIT, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """
    Finalized interviews taken by other users, newest first
    """
    try:
        return await get_latest_interviews(store, current_user.id, limit=limit)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/mine", response_model=List[Interview])
async def get_my_interviews(
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """
    All interviews of the current user, newest first
    """
    try:
        return await get_user_interviews(store, current_user.id)
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{interview_id}", response_model=dict)
async def get_interview_details(
    interview_id: str,
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """
    Get a single interview with its tech stack logos
    """
    try:
        interview = await get_interview(store, interview_id)
        if interview is None:
            raise HTTPException(status_code=404, detail="Interview not found")

        tech_logos = await get_tech_logos(interview.techStack)

        return {
            "interview": interview.model_dump(mode="json"),
            "techLogos": [logo.model_dump() for logo in tech_logos]
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/{interview_id}/feedback", response_model=FeedbackResult)
@limiter.limit(FEEDBACK_RATE_LIMIT)
async def submit_interview_feedback(
    request: Request,
    interview_id: str,
    feedback_request: CreateFeedbackRequest,
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
    completion_client: StructuredCompletionClient = Depends(get_completion_client)
):
    """
    Evaluate a finished interview transcript and save the feedback.
    Pass feedbackId to replace an earlier evaluation of the same attempt;
    it must belong to the current user and this interview.
    """
    try:
        interview = await get_interview(store, interview_id)
        if interview is None:
            raise HTTPException(status_code=404, detail="Interview not found")

        if feedback_request.feedbackId:
            existing = await store.get(FEEDBACK_COLLECTION, feedback_request.feedbackId)
            if existing.exists and (
                existing.data.get("userId") != current_user.id
                or existing.data.get("interviewId") != interview_id
            ):
                logger.warning(
                    "User %s tried to replace feedback %s owned by %s for interview %s",
                    current_user.id, feedback_request.feedbackId,
                    existing.data.get("userId"), existing.data.get("interviewId")
                )
                raise HTTPException(status_code=403, detail="Feedback belongs to another interview attempt")

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

    result = await create_feedback(
        store,
        completion_client,
        interview_id=interview_id,
        user_id=current_user.id,
        transcript=feedback_request.transcript,
        feedback_id=feedback_request.feedbackId
    )

    if not result.success:
        raise HTTPException(status_code=502, detail=result.message)

    return result


@router.get("/{interview_id}/feedback", response_model=Feedback)
async def get_interview_feedback(
    interview_id: str,
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """
    Get the current user's feedback for an interview
    """
    try:
        feedback = await get_feedback(store, interview_id, current_user.id)
        if feedback is None:
            raise HTTPException(status_code=404, detail="Feedback not found")
        return feedback

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
