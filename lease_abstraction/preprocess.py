from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import fitz  # PyMuPDF
import pytesseract
from PIL import Image

from .config import AbstractionConfig

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


def noop_progress(message: str) -> None:
    pass


@dataclass
class PageText:
    number: int
    text: str
    used_ocr: bool = False


class TesseractWorker:
    """
    Thin wrapper around the Tesseract binary.

    Creating one checks that Tesseract is installed, so it is only done when a
    page actually needs OCR. pytesseract runs a fresh tesseract process per
    call and keeps nothing per worker, so releasing it just ends the session.
    """

    def __init__(self, language: str = "eng"):
        self.language = language
        self.version = pytesseract.get_tesseract_version()
        logger.debug("Started Tesseract %s (lang=%s)", self.version, language)

    def recognize(self, image: Image.Image) -> str:
        return pytesseract.image_to_string(image, lang=self.language)

    def close(self) -> None:
        logger.debug("Released Tesseract worker")


OcrWorkerFactory = Callable[[], Any]


class OcrSession:
    """
    Per-document OCR scope.

    The worker is created on first use and always released on exit, whether
    the document finished or failed.
    """

    def __init__(self, factory: OcrWorkerFactory):
        self._factory = factory
        self._worker: Optional[Any] = None

    @property
    def started(self) -> bool:
        return self._worker is not None

    @property
    def worker(self) -> Any:
        if self._worker is None:
            self._worker = self._factory()
        return self._worker

    def recognize(self, image: Image.Image) -> str:
        return self.worker.recognize(image)

    def close(self) -> None:
        if self._worker is not None:
            try:
                self._worker.close()
            finally:
                self._worker = None

    def __enter__(self) -> "OcrSession":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class PageTextAcquirer:
    """
    Returns the text of one PDF page, falling back to OCR for scanned pages.
    """

    def __init__(
        self,
        config: AbstractionConfig | None = None,
        ocr_factory: OcrWorkerFactory | None = None,
    ):
        self.config = config or AbstractionConfig()
        self.ocr_factory = ocr_factory or (lambda: TesseractWorker(self.config.ocr_language))

    def session(self) -> OcrSession:
        return OcrSession(self.ocr_factory)

    def needs_ocr(self, item_count: int, text: str) -> bool:
        return (
            item_count < self.config.ocr_item_threshold
            and len(text.strip()) < self.config.ocr_char_threshold
        )

    def acquire(
        self,
        page: fitz.Page,
        ocr: OcrSession,
        *,
        label: str = "",
        on_progress: ProgressCallback = noop_progress,
    ) -> PageText:
        number = page.number + 1
        words = page.get_text("words")
        native_text = " ".join(word[4] for word in words)

        if not self.needs_ocr(len(words), native_text):
            return PageText(number=number, text=native_text, used_ocr=False)

        logger.info(
            "%s page %d looks scanned (%d items, %d chars), using OCR",
            label,
            number,
            len(words),
            len(native_text.strip()),
        )
        on_progress(f"Running OCR on {label} page {number}...")
        image = self._render(page)
        text = ocr.recognize(image)
        on_progress(f"OCR complete for {label} page {number}")
        return PageText(number=number, text=text, used_ocr=True)

    def _render(self, page: fitz.Page) -> Image.Image:
        scale = self.config.ocr_scale
        pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
        mode = "RGB" if pix.n < 4 else "RGBA"
        image = Image.frombytes(mode, [pix.width, pix.height], pix.samples)
        if mode == "RGBA":
            image = image.convert("RGB")
        return image
