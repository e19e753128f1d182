from __future__ import annotations

import os
from dataclasses import dataclass

PAGE_BREAK = "\n\n--- PAGE BREAK ---\n\n"
DOCUMENT_BOUNDARY = "\n\n--- END OF DOCUMENT ---\n\n"


@dataclass(frozen=True)
class AbstractionConfig:
    """Settings shared by text acquisition, extraction and Q&A."""

    model_name: str = "gpt-4o"

    # A page is treated as a scanned image only when both signals are low.
    ocr_item_threshold: int = 15
    ocr_char_threshold: int = 150
    ocr_scale: float = 2.0
    ocr_language: str = "eng"

    page_break: str = PAGE_BREAK
    document_boundary: str = DOCUMENT_BOUNDARY

    def __post_init__(self) -> None:
        if self.ocr_scale < 2.0:
            raise ValueError("ocr_scale must be at least 2.0")


def get_default_config() -> AbstractionConfig:
    """Build the configuration from environment variables."""
    return AbstractionConfig(
        model_name=os.getenv("LEASE_MODEL", "gpt-4o"),
        ocr_language=os.getenv("LEASE_OCR_LANG", "eng"),
        ocr_scale=float(os.getenv("LEASE_OCR_SCALE", "2.0")),
    )
