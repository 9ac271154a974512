from typing import Optional, List

from models.interview import Feedback, Interview
from services.document_store import DocumentStore
from services.feedback_ai import FEEDBACK_COLLECTION

INTERVIEWS_COLLECTION = "interviews"

DEFAULT_FEED_LIMIT = 20


async def get_interview(store: DocumentStore, interview_id: str) -> Optional[Interview]:
    snapshot = await store.get(INTERVIEWS_COLLECTION, interview_id)
    if not snapshot.exists:
        return None
    return Interview.model_validate(snapshot.to_dict())


async def get_feedback(store: DocumentStore, interview_id: str, user_id: str) -> Optional[Feedback]:
    """
    Feedback for one interview attempt. If duplicates exist (see create_feedback)
    whichever one the store returns first is used.
    """
    docs = await store.query(
        FEEDBACK_COLLECTION,
        filters=[("interviewId", "==", interview_id), ("userId", "==", user_id)],
        limit=1,
    )
    if not docs:
        return None
    return Feedback.model_validate(docs[0].to_dict())


async def get_latest_interviews(store: DocumentStore, user_id: str, limit: int = DEFAULT_FEED_LIMIT) -> List[Interview]:
    """Finalized interviews taken by other users, newest first."""
    docs = await store.query(
        INTERVIEWS_COLLECTION,
        filters=[("finalized", "==", True), ("userId", "!=", user_id)],
        order_by="createdAt",
        direction="desc",
        limit=limit,
    )
    return [Interview.model_validate(doc.to_dict()) for doc in docs]


async def get_user_interviews(store: DocumentStore, user_id: str) -> List[Interview]:
    """All interviews owned by the user, newest first. Not capped."""
    docs = await store.query(
        INTERVIEWS_COLLECTION,
        filters=[("userId", "==", user_id)],
        order_by="createdAt",
        direction="desc",
    )
    return [Interview.model_validate(doc.to_dict()) for doc in docs]
