from __future__ import annotations


class AbstractionError(Exception):
    """Base class for failures that stop an abstraction run."""


class AcquisitionError(AbstractionError):
    """A page of a document could not be read, rendered or OCR'd."""

    def __init__(self, document_name: str, message: str):
        super().__init__(f"Failed to read {document_name}: {message}")
        self.document_name = document_name


class EmptyResponseError(AbstractionError):
    """The model returned no text for a unit that requires content."""

    def __init__(self, unit_label: str):
        super().__init__(f"Empty response for {unit_label}")
        self.unit_label = unit_label


class MalformedResponseError(AbstractionError):
    """The model returned text that is not the requested JSON object."""

    def __init__(self, unit_label: str, raw_text: str, reason: str = "invalid JSON"):
        super().__init__(f"Malformed response for {unit_label}: {reason}")
        self.unit_label = unit_label
        # kept for debug logging only
        self.raw_text = raw_text


class GenerationError(AbstractionError):
    """The generation backend failed while answering a unit's request."""

    def __init__(self, unit_label: str, message: str):
        super().__init__(f"Generation failed for {unit_label}: {message}")
        self.unit_label = unit_label
