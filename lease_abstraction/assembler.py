from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import fitz  # PyMuPDF

from .config import AbstractionConfig
from .documents import SourceDocument, document_set_key
from .errors import AcquisitionError
from .preprocess import PageText, PageTextAcquirer, ProgressCallback, noop_progress

logger = logging.getLogger(__name__)


class TextCache:
    """
    Holds the assembled text of the most recent document set.

    The entry is replaced wholesale and only returned for a matching key.
    """

    def __init__(self) -> None:
        self._key: Optional[str] = None
        self._text: Optional[str] = None

    def get(self, key: str) -> Optional[str]:
        if key == self._key:
            return self._text
        return None

    def put(self, key: str, text: str) -> None:
        self._key = key
        self._text = text

    def clear(self) -> None:
        self._key = None
        self._text = None


text_cache = TextCache()


@dataclass
class DocumentText:
    name: str
    pages: List[PageText]

    @property
    def ocr_pages(self) -> List[int]:
        return [page.number for page in self.pages if page.used_ocr]


@dataclass
class DocumentTextAssembler:
    """
    Reads every page of every document, in order, into one string.
    """

    config: AbstractionConfig = field(default_factory=AbstractionConfig)
    acquirer: Optional[PageTextAcquirer] = None
    cache: TextCache = field(default_factory=lambda: text_cache)

    def __post_init__(self) -> None:
        if self.acquirer is None:
            self.acquirer = PageTextAcquirer(self.config)

    def load(self, document: SourceDocument, on_progress: ProgressCallback = noop_progress) -> DocumentText:
        pages: List[PageText] = []
        try:
            with fitz.open(stream=document.data, filetype="pdf") as pdf, self.acquirer.session() as ocr:
                total = pdf.page_count
                for page_index in range(total):
                    on_progress(f"Reading {document.name}: page {page_index + 1} of {total}...")
                    page = pdf.load_page(page_index)
                    pages.append(
                        self.acquirer.acquire(
                            page, ocr, label=document.name, on_progress=on_progress
                        )
                    )
        except Exception as exc:
            logger.exception("Text acquisition failed for %s", document.name)
            raise AcquisitionError(document.name, str(exc)) from exc

        result = DocumentText(name=document.name, pages=pages)
        logger.info("Read %s: %d pages, OCR on %s", document.name, len(pages), result.ocr_pages or "none")
        return result

    def assemble(
        self,
        documents: Sequence[SourceDocument],
        on_progress: ProgressCallback = noop_progress,
    ) -> str:
        """
        Build the assembled text and store it in the shared cache.

        Raises AcquisitionError for the first document that cannot be read.
        """
        documents = list(documents)
        texts = [
            self.config.page_break.join(page.text for page in self.load(doc, on_progress).pages)
            for doc in documents
        ]
        assembled = self.config.document_boundary.join(texts)
        self.cache.put(document_set_key(documents), assembled)
        logger.info("Assembled %d documents (%d chars)", len(documents), len(assembled))
        return assembled

    def get_text(
        self,
        documents: Sequence[SourceDocument],
        on_progress: ProgressCallback = noop_progress,
    ) -> str:
        documents = list(documents)
        cached = self.cache.get(document_set_key(documents))
        if cached is not None:
            logger.debug("Using cached text for %d documents", len(documents))
            return cached
        return self.assemble(documents, on_progress)
