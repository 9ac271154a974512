from datetime import datetime, timezone
from typing import Optional, List

from core.errors import InterviewAppError
from core.logging_config import get_logger
from models.interview import (
    FeedbackRecord, FeedbackResult, FeedbackSchema, TranscriptEntry
)
from services.completion import StructuredCompletionClient
from services.document_store import DocumentStore
from services.transcript import format_transcript

logger = get_logger(__name__)

FEEDBACK_COLLECTION = "feedback"

FEEDBACK_SYSTEM_INSTRUCTION = (
    "You are a professional interviewer analyzing a mock interview. "
    "Your task is to evaluate the candidate based on structured categories."
)

FEEDBACK_PROMPT_TEMPLATE = """
You are an AI interviewer analyzing a mock interview. Evaluate the candidate based on structured categories.
Be thorough and detailed in your analysis. Don't be lenient with the candidate.
If there are mistakes or areas for improvement, point them out.

Transcript:
{transcript}

Score the candidate from 0 to 100 in the following areas. Do not add categories other than the ones provided:
- Communication Skills: Clarity, articulation, structured responses.
- Technical Knowledge: Understanding of key concepts for the role.
- Problem-Solving: Ability to analyze problems and propose solutions.
- Cultural & Role Fit: Alignment with company values and job role.
- Confidence & Clarity: Confidence in responses, engagement, and clarity.

Also give an overall totalScore from 0 to 100, a list of strengths, a list of areasForImprovement
and a finalAssessment paragraph.
"""


def build_feedback_prompt(transcript: List[TranscriptEntry]) -> str:
    return FEEDBACK_PROMPT_TEMPLATE.format(transcript=format_transcript(transcript))


async def create_feedback(
    store: DocumentStore,
    completion_client: StructuredCompletionClient,
    interview_id: str,
    user_id: str,
    transcript: List[TranscriptEntry],
    feedback_id: Optional[str] = None,
) -> FeedbackResult:
    """
    Evaluate a finished interview transcript and save the feedback.

    With `feedback_id` the existing document is replaced, otherwise a new
    document is created. No lookup for a previous record is made, so two calls
    without an id create two records. Nothing is written unless the model
    output passed schema validation.
    """
    logger.info("Generating feedback for interview %s (user %s, %d turns)", interview_id, user_id, len(transcript))

    try:
        evaluation = await completion_client.complete(
            FEEDBACK_SYSTEM_INSTRUCTION,
            build_feedback_prompt(transcript),
            FeedbackSchema,
        )

        record = FeedbackRecord(
            interviewId=interview_id,
            userId=user_id,
            totalScore=evaluation.totalScore,
            categoryScores=evaluation.categoryScores,
            strengths=evaluation.strengths,
            areasForImprovement=evaluation.areasForImprovement,
            finalAssessment=evaluation.finalAssessment,
            createdAt=datetime.now(timezone.utc),
        )

        doc_id = feedback_id or store.new_id(FEEDBACK_COLLECTION)
        await store.set(FEEDBACK_COLLECTION, doc_id, record.to_document())

    except InterviewAppError as e:
        logger.error("Error saving feedback for interview %s: %s", interview_id, e, exc_info=True)
        return FeedbackResult(success=False, message=f"Failed to generate feedback: {e.message}")
    except Exception as e:
        logger.exception("Unexpected error saving feedback for interview %s", interview_id)
        return FeedbackResult(success=False, message=f"Failed to generate feedback: {e}")

    logger.info(
        "%s feedback %s for interview %s",
        "Replaced" if feedback_id else "Created", doc_id, interview_id
    )
    return FeedbackResult(success=True, feedbackId=doc_id, message="Feedback saved")
