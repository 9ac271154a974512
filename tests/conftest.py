from datetime import datetime, timedelta, timezone

import jwt
import pytest

from core.config import JWT_ALGORITHM, JWT_SECRET_KEY
from models.interview import TranscriptEntry
from services.completion import StructuredCompletionClient, validate_completion
from services.document_store import InMemoryDocumentStore


VALID_EVALUATION = {
    "totalScore": 72,
    "categoryScores": {
        "Communication Skills": 80,
        "Technical Knowledge": 70,
        "Problem-Solving": 65,
        "Cultural & Role Fit": 75,
        "Confidence & Clarity": 70,
    },
    "strengths": ["Clear explanations", "Good React fundamentals"],
    "areasForImprovement": ["Go deeper on state management"],
    "finalAssessment": "Solid candidate who needs more depth on architecture.",
}


def issue_token(claims, expires_in=timedelta(hours=1)):
    """Sign a bearer token the way the external sign-in service does."""
    payload = {**claims, "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


class FakeCompletionClient(StructuredCompletionClient):
    """Returns a fixed payload run through the same validation as the OpenAI client."""

    def __init__(self, payload=None, error=None):
        self.payload = VALID_EVALUATION if payload is None else payload
        self.error = error
        self.calls = []

    async def complete(self, system_instruction, prompt, schema):
        self.calls.append({"system": system_instruction, "prompt": prompt, "schema": schema})
        if self.error is not None:
            raise self.error
        return validate_completion(self.payload, schema)


class RecordingStore(InMemoryDocumentStore):
    """In-memory store that records writes and can be told to fail them."""

    def __init__(self, seed=None, write_error=None, read_error=None):
        super().__init__(seed)
        self.set_calls = []
        self.write_error = write_error
        self.read_error = read_error

    async def get(self, collection, doc_id):
        if self.read_error is not None:
            raise self.read_error
        return await super().get(collection, doc_id)

    async def query(self, collection, filters=(), order_by=None, direction="desc", limit=None):
        if self.read_error is not None:
            raise self.read_error
        return await super().query(collection, filters, order_by, direction, limit)

    async def set(self, collection, doc_id, data):
        self.set_calls.append((collection, doc_id, data))
        if self.write_error is not None:
            raise self.write_error
        await super().set(collection, doc_id, data)


def make_interview(interview_id, user_id, finalized, created_at, **extra):
    data = {
        "userId": user_id,
        "role": "Frontend Developer",
        "type": "Technical",
        "level": "Junior",
        "techStack": ["React", "TypeScript"],
        "questions": ["What is a closure?"],
        "finalized": finalized,
        "createdAt": created_at,
        "coverImage": "/covers/adobe.png",
    }
    data.update(extra)
    return interview_id, data


@pytest.fixture
def interviews_seed():
    return dict([
        make_interview("i1", "u1", True, "2024-01-02T00:00:00+00:00"),
        make_interview("i2", "u2", True, "2024-01-03T00:00:00+00:00"),
        make_interview("i3", "u1", False, "2024-01-04T00:00:00+00:00"),
    ])


@pytest.fixture
def store(interviews_seed):
    return RecordingStore({
        "interviews": interviews_seed,
        "users": {
            "u1": {"name": "Ada", "email": "ada@example.com"},
            "u2": {"name": "Grace", "email": "grace@example.com"},
        },
    })


@pytest.fixture
def completion_client():
    return FakeCompletionClient()


@pytest.fixture
def transcript():
    return [
        TranscriptEntry(role="interviewer", content="Tell me about yourself."),
        TranscriptEntry(role="candidate", content="I build React apps."),
    ]
