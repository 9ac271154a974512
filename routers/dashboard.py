import asyncio
from fastapi import APIRouter, HTTPException, Depends
from typing import List
from services.dependencies import get_document_store
from services.document_store import DocumentStore
from services.interview_queries import get_feedback, get_latest_interviews, get_user_interviews
from services.tech_icons import get_random_interview_cover, get_tech_logos
from models.auth import User
from models.interview import Interview, InterviewCard
from auth.dependencies import get_current_user

router = APIRouter(tags=["Dashboard"])


async def build_interview_card(store: DocumentStore, interview: Interview, user_id: str) -> InterviewCard:
    feedback, tech_logos = await asyncio.gather(
        get_feedback(store, interview.id, user_id),
        get_tech_logos(interview.techStack)
    )

    if not interview.coverImage:
        interview = interview.model_copy(update={"coverImage": get_random_interview_cover()})

    return InterviewCard(
        interview=interview,
        techLogos=tech_logos,
        totalScore=feedback.totalScore if feedback else None,
        feedbackId=feedback.id if feedback else None
    )


async def build_interview_cards(store: DocumentStore, interviews: List[Interview], user_id: str) -> List[InterviewCard]:
    return list(await asyncio.gather(
        *(build_interview_card(store, interview, user_id) for interview in interviews)
    ))


@router.get("/api/dashboard")
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store)
):
    """
    Home page data: the user's own interviews and the latest interviews of other users,
    each with the current user's feedback score when one exists
    """
    try:
        user_interviews, latest_interviews = await asyncio.gather(
            get_user_interviews(store, current_user.id),
            get_latest_interviews(store, current_user.id)
        )

        user_cards, latest_cards = await asyncio.gather(
            build_interview_cards(store, user_interviews, current_user.id),
            build_interview_cards(store, latest_interviews, current_user.id)
        )

        return {
            "user": current_user.model_dump(),
            "has_past_interviews": len(user_cards) > 0,
            "has_upcoming_interviews": len(latest_cards) > 0,
            "user_interviews": [card.model_dump(mode="json") for card in user_cards],
            "latest_interviews": [card.model_dump(mode="json") for card in latest_cards]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
