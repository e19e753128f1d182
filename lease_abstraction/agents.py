from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Union

from pydantic import BaseModel
from pydantic_ai import Agent
from pydantic_ai.models import Model
from pydantic_ai.models.openai import OpenAIModel

from .schema import SchemaNode, build_model

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    """One call to the generation model."""

    content: str
    system_instruction: str = ""
    # None means a free-text answer
    response_shape: Optional[SchemaNode] = None


@dataclass(frozen=True)
class GenerationResponse:
    text: Optional[str]


class GenerationBackend(Protocol):
    def generate(self, request: GenerationRequest) -> GenerationResponse:
        ...


class PydanticAIBackend:
    """
    Generation backend built on a pydanticAI agent.

    Structured requests bind a Pydantic model derived from the response shape,
    and the validated output is returned as JSON text.
    """

    def __init__(self, model_name: str = "gpt-4o"):
        self.model_name = model_name
        self._model: Optional[Union[Model, str]] = None

    @property
    def model(self) -> Union[Model, str]:
        if self._model is None:
            # "provider:model" strings are resolved by pydanticAI itself.
            if ":" in self.model_name:
                self._model = self.model_name
            else:
                self._model = OpenAIModel(self.model_name)
        return self._model

    def _agent(self, request: GenerationRequest) -> Agent[Any]:
        output_type: Any = str
        if request.response_shape is not None:
            output_type = build_model(request.response_shape, name="ExtractionResponse")
        return Agent[Any](
            model=self.model,
            output_type=output_type,
            system_prompt=request.system_instruction or (),
            # invalid output is reported, never re-requested
            retries=0,
        )

    def generate(self, request: GenerationRequest) -> GenerationResponse:
        agent = self._agent(request)
        # pydanticAI agents are async-first; run_sync keeps one request in flight.
        result = agent.run_sync(request.content)
        output = result.output
        if isinstance(output, BaseModel):
            return GenerationResponse(text=output.model_dump_json())
        if output is None:
            return GenerationResponse(text=None)
        return GenerationResponse(text=str(output))
