import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import OpenAIError

from core.errors import CompletionFailure
from models.interview import FeedbackSchema
from services.completion import OpenAIStructuredCompletionClient, validate_completion
from tests.conftest import VALID_EVALUATION


def fake_openai(content=None, error=None):
    client = MagicMock()
    if error is not None:
        client.chat.completions.create = AsyncMock(side_effect=error)
    else:
        response = MagicMock()
        response.choices = [MagicMock(message=MagicMock(content=content))]
        client.chat.completions.create = AsyncMock(return_value=response)
    return client


def test_validate_completion_accepts_json_text():
    evaluation = validate_completion(json.dumps(VALID_EVALUATION), FeedbackSchema)

    assert evaluation.totalScore == 72
    assert evaluation.categoryScores.communication_skills == 80


def test_validate_completion_rejects_non_json():
    with pytest.raises(CompletionFailure):
        validate_completion("Sure! Here is the feedback...", FeedbackSchema)


def test_validate_completion_rejects_json_array():
    with pytest.raises(CompletionFailure):
        validate_completion("[1, 2, 3]", FeedbackSchema)


def test_validate_completion_rejects_float_scores():
    payload = {**VALID_EVALUATION, "totalScore": 72.5}

    with pytest.raises(CompletionFailure) as excinfo:
        validate_completion(payload, FeedbackSchema)
    assert excinfo.value.details["errors"]


def test_openai_client_parses_response():
    openai_client = fake_openai(content=json.dumps(VALID_EVALUATION))
    client = OpenAIStructuredCompletionClient(client=openai_client, model="gpt-4o")

    evaluation = asyncio.run(client.complete("Be an evaluator.", "Transcript: ...", FeedbackSchema))

    assert evaluation.finalAssessment == VALID_EVALUATION["finalAssessment"]
    kwargs = openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][0]["role"] == "system"
    assert kwargs["messages"][0]["content"].startswith("Be an evaluator.")
    assert "Cultural & Role Fit" in kwargs["messages"][0]["content"]
    assert kwargs["messages"][1] == {"role": "user", "content": "Transcript: ..."}


def test_openai_client_wraps_provider_errors():
    client = OpenAIStructuredCompletionClient(client=fake_openai(error=OpenAIError("rate limited")))

    with pytest.raises(CompletionFailure):
        asyncio.run(client.complete("system", "prompt", FeedbackSchema))


def test_openai_client_rejects_empty_content():
    client = OpenAIStructuredCompletionClient(client=fake_openai(content=None))

    with pytest.raises(CompletionFailure):
        asyncio.run(client.complete("system", "prompt", FeedbackSchema))
