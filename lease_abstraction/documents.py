from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from mimetypes import guess_type
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Sequence

if TYPE_CHECKING:
    from .assembler import TextCache

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class SourceDocument:
    """One selected input file, in memory."""

    name: str
    data: bytes = field(repr=False)
    content_type: str = PDF_CONTENT_TYPE

    @classmethod
    def from_path(cls, path: Path) -> "SourceDocument":
        content_type = guess_type(path.name)[0] or "application/octet-stream"
        return cls(name=path.name, data=path.read_bytes(), content_type=content_type)

    @property
    def is_pdf(self) -> bool:
        return self.content_type == PDF_CONTENT_TYPE

    @property
    def digest(self) -> str:
        return hashlib.sha256(self.data).hexdigest()


def document_set_key(documents: Sequence[SourceDocument]) -> str:
    """
    Identity of an ordered document set.

    Used as the cache key for assembled text, so any change in names, order or
    content yields a different key.
    """
    hasher = hashlib.sha256()
    for doc in documents:
        hasher.update(doc.name.encode("utf-8"))
        hasher.update(b"\0")
        hasher.update(doc.digest.encode("ascii"))
        hasher.update(b"\n")
    return hasher.hexdigest()


class DocumentSet:
    """
    Ordered, name-unique selection of lease documents.

    Order is the chronological input order: original lease first, then each
    amendment as it was added.
    """

    def __init__(self, cache: Optional["TextCache"] = None):
        self._documents: List[SourceDocument] = []
        self._cache = cache

    def __iter__(self) -> Iterator[SourceDocument]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __getitem__(self, index: int) -> SourceDocument:
        return self._documents[index]

    @property
    def documents(self) -> List[SourceDocument]:
        return list(self._documents)

    @property
    def identity(self) -> str:
        return document_set_key(self._documents)

    def add(self, documents: Iterable[SourceDocument]) -> List[str]:
        """
        Add PDFs in order, ignoring duplicates by name.

        Returns user-facing notices; non-PDF inputs are rejected while the
        PDFs from the same batch are still accepted.
        """
        notices: List[str] = []
        rejected = False
        names = {doc.name for doc in self._documents}
        for doc in documents:
            if not doc.is_pdf:
                logger.warning("Ignoring non-PDF input %s (%s)", doc.name, doc.content_type)
                rejected = True
                continue
            if doc.name in names:
                logger.info("Skipping duplicate document %s", doc.name)
                continue
            self._documents.append(doc)
            names.add(doc.name)
        if rejected:
            notices.append("Only PDF files are accepted. Non-PDF files have been ignored.")
        return notices

    def remove(self, name: str) -> None:
        self._documents = [doc for doc in self._documents if doc.name != name]
        if not self._documents:
            self._invalidate()

    def clear(self) -> None:
        self._documents = []
        self._invalidate()

    def _invalidate(self) -> None:
        if self._cache is not None:
            logger.debug("Document set empty, clearing text cache")
            self._cache.clear()
