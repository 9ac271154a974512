from datetime import datetime
from typing import Optional, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


CATEGORY_NAMES = (
    "Communication Skills",
    "Technical Knowledge",
    "Problem-Solving",
    "Cultural & Role Fit",
    "Confidence & Clarity",
)

# Labels used by voice agents for the two speakers
SPEAKER_ALIASES = {
    "assistant": "interviewer",
    "user": "candidate",
}


class TranscriptEntry(BaseModel):
    role: Literal["interviewer", "candidate"]
    content: str

    @field_validator("role", mode="before")
    @classmethod
    def map_speaker_alias(cls, value):
        if isinstance(value, str):
            return SPEAKER_ALIASES.get(value.lower(), value.lower())
        return value


class CategoryScores(BaseModel):
    """Scores for the five fixed evaluation categories, keyed by display name."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    communication_skills: int = Field(alias="Communication Skills", ge=0, le=100, strict=True)
    technical_knowledge: int = Field(alias="Technical Knowledge", ge=0, le=100, strict=True)
    problem_solving: int = Field(alias="Problem-Solving", ge=0, le=100, strict=True)
    cultural_and_role_fit: int = Field(alias="Cultural & Role Fit", ge=0, le=100, strict=True)
    confidence_and_clarity: int = Field(alias="Confidence & Clarity", ge=0, le=100, strict=True)


class FeedbackSchema(BaseModel):
    """Output schema the evaluator model must satisfy."""
    model_config = ConfigDict(extra="forbid")

    totalScore: int = Field(ge=0, le=100, strict=True)
    categoryScores: CategoryScores
    strengths: List[str]
    areasForImprovement: List[str]
    finalAssessment: str


class FeedbackRecord(BaseModel):
    interviewId: str
    userId: str
    totalScore: int = Field(ge=0, le=100)
    categoryScores: CategoryScores
    strengths: List[str]
    areasForImprovement: List[str]
    finalAssessment: str
    createdAt: datetime

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Feedback(FeedbackRecord):
    id: str


class Interview(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    userId: str
    role: str
    type: Optional[str] = None
    level: Optional[str] = None
    techStack: List[str] = []
    questions: List[str] = []
    finalized: bool = False
    createdAt: datetime
    coverImage: Optional[str] = None


class CreateFeedbackRequest(BaseModel):
    transcript: List[TranscriptEntry]
    feedbackId: Optional[str] = None


class FeedbackResult(BaseModel):
    success: bool
    feedbackId: Optional[str] = None
    message: str


class TechLogo(BaseModel):
    tech: str
    url: str


class InterviewCard(BaseModel):
    interview: Interview
    techLogos: List[TechLogo] = []
    totalScore: Optional[int] = None
    feedbackId: Optional[str] = None
