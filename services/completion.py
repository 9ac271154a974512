import json
from abc import ABC, abstractmethod
from typing import Type, TypeVar

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from core.config import OPENAI_KEY, OPENAI_MODEL, OPENAI_TEMPERATURE, OPENAI_TIMEOUT_SECONDS
from core.errors import CompletionFailure
from core.logging_config import get_logger

logger = get_logger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_completion(raw, schema: Type[SchemaT]) -> SchemaT:
    """Parse the raw model output (JSON text or dict) into `schema`, raising CompletionFailure when it does not conform."""
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CompletionFailure("Model output is not valid JSON", {"error": str(e)}) from e

    if not isinstance(raw, dict):
        raise CompletionFailure("Model output is not a JSON object", {"type": type(raw).__name__})

    try:
        return schema.model_validate(raw)
    except ValidationError as e:
        raise CompletionFailure(
            f"Model output does not match {schema.__name__}",
            {"errors": e.errors(include_url=False, include_input=False)},
        ) from e


class StructuredCompletionClient(ABC):
    @abstractmethod
    async def complete(self, system_instruction: str, prompt: str, schema: Type[SchemaT]) -> SchemaT:
        """
        Ask the model for an object matching `schema`.
        Returns:
            an instance of `schema`
        Raises:
            CompletionFailure when the call fails or the output does not conform
        """
        pass


class OpenAIStructuredCompletionClient(StructuredCompletionClient):
    def __init__(
        self,
        client: AsyncOpenAI = None,
        model: str = OPENAI_MODEL,
        temperature: float = OPENAI_TEMPERATURE,
    ):
        self.client = client or AsyncOpenAI(api_key=OPENAI_KEY, timeout=OPENAI_TIMEOUT_SECONDS)
        self.model = model
        self.temperature = temperature

    async def complete(self, system_instruction: str, prompt: str, schema: Type[SchemaT]) -> SchemaT:
        json_schema = json.dumps(schema.model_json_schema(by_alias=True), indent=2)

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": f"{system_instruction} Respond with valid JSON matching this schema:\n{json_schema}"},
                    {"role": "user", "content": prompt}
                ],
                temperature=self.temperature,
                response_format={"type": "json_object"}
            )
        except OpenAIError as e:
            logger.error("Completion request to %s failed: %s", self.model, e)
            raise CompletionFailure(f"Completion request failed: {e}") from e

        if not response.choices or response.choices[0].message.content is None:
            raise CompletionFailure("Completion returned no content")

        return validate_completion(response.choices[0].message.content, schema)
