from .auth import SignUpRequest, TokenData, User
from .interview import (
    CATEGORY_NAMES, TranscriptEntry, CategoryScores, FeedbackSchema, FeedbackRecord, Feedback,
    Interview, CreateFeedbackRequest, FeedbackResult, TechLogo, InterviewCard
)
