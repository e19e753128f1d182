from __future__ import annotations

import json
from typing import Callable, Dict, List, Optional, Union

import fitz  # PyMuPDF
import pytest

from lease_abstraction.agents import GenerationRequest, GenerationResponse
from lease_abstraction.assembler import DocumentTextAssembler, TextCache
from lease_abstraction.documents import SourceDocument
from lease_abstraction.preprocess import PageTextAcquirer


def native_page(token: str, lines: int = 20) -> str:
    """Text that comfortably passes both OCR thresholds."""
    return "\n".join(f"{token} section {i} tenant shall pay rent monthly" for i in range(lines))


def make_pdf(pages: List[Optional[str]]) -> bytes:
    """Build a PDF; a None page is left blank, like a scanned image."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


def make_document(name: str, pages: List[Optional[str]]) -> SourceDocument:
    return SourceDocument(name=name, data=make_pdf(pages))


class FakeOcrWorker:
    def __init__(self, events: List[str], text: str = "SCANNED TEXT", fail: bool = False):
        self.events = events
        self.text = text
        self.fail = fail
        events.append("start")

    def recognize(self, image) -> str:
        self.events.append("ocr")
        if self.fail:
            raise RuntimeError("tesseract crashed")
        return self.text

    def close(self) -> None:
        self.events.append("close")


class CountingAcquirer(PageTextAcquirer):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.calls = 0

    def acquire(self, page, ocr, **kwargs):
        self.calls += 1
        return super().acquire(page, ocr, **kwargs)


Reply = Union[str, None, Exception, Callable[[GenerationRequest], str]]


class FakeBackend:
    """Replies by unit key; free-text requests use the `answer` reply."""

    def __init__(self, replies: Optional[Dict[str, Reply]] = None, answer: Reply = "An answer."):
        self.replies = replies or {}
        self.answer = answer
        self.requests: List[GenerationRequest] = []

    def _reply(self, request: GenerationRequest) -> Reply:
        if request.response_shape is None:
            return self.answer
        key = request.response_shape.children[0].key
        if key in self.replies:
            return self.replies[key]
        node = request.response_shape.children[0]
        value = "Not Provided" if node.type == "string" else node.empty_value()
        return json.dumps({key: value})

    def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.requests.append(request)
        reply = self._reply(request)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            reply = reply(request)
        return GenerationResponse(text=reply)


@pytest.fixture
def ocr_events() -> List[str]:
    return []


@pytest.fixture
def acquirer(ocr_events) -> CountingAcquirer:
    return CountingAcquirer(ocr_factory=lambda: FakeOcrWorker(ocr_events))


@pytest.fixture
def assembler(acquirer) -> DocumentTextAssembler:
    return DocumentTextAssembler(acquirer=acquirer, cache=TextCache())
