from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .agents import GenerationBackend, GenerationRequest
from .assembler import DocumentTextAssembler
from .documents import SourceDocument
from .prompts import question_prompt

logger = logging.getLogger(__name__)


@dataclass
class ChatTurn:
    question: str
    answer: Optional[str] = None


class QuestionAnswerer:
    """
    Answers free-form questions against the assembled lease text.

    Each question is a single stateless request; only the local transcript
    keeps history.
    """

    def __init__(
        self,
        backend: GenerationBackend,
        assembler: DocumentTextAssembler | None = None,
    ):
        self.backend = backend
        self.assembler = assembler or DocumentTextAssembler()
        self.transcript: List[ChatTurn] = []
        self.notice: Optional[str] = None

    def ask(self, documents: Sequence[SourceDocument], question: str) -> Optional[str]:
        """
        Return the answer, or None after rolling the question back.

        On failure `notice` holds a message for the user.
        """
        question = question.strip()
        if not question:
            return None
        if not documents:
            self.notice = "Please upload one or more lease documents first."
            return None

        self.notice = None
        turn = ChatTurn(question=question)
        self.transcript.append(turn)
        try:
            text = self.assembler.get_text(documents)
            response = self.backend.generate(
                GenerationRequest(content=question_prompt(text, question))
            )
            if response.text is None or not response.text.strip():
                raise ValueError("empty answer")
        except Exception as exc:
            logger.exception("Question failed: %s", question)
            self.transcript.remove(turn)
            self.notice = f"Sorry, the question could not be answered ({exc}). Please try again."
            return None

        turn.answer = response.text.strip()
        return turn.answer

    def clear(self) -> None:
        self.transcript = []
        self.notice = None
