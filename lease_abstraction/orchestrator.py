from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Literal, Sequence

from pydantic import ValidationError

from .agents import GenerationBackend, GenerationRequest
from .assembler import DocumentTextAssembler
from .documents import SourceDocument
from .errors import (
    AbstractionError,
    AcquisitionError,
    EmptyResponseError,
    GenerationError,
    MalformedResponseError,
)
from .lease_schema import LEASE_ABSTRACT_SCHEMA
from .preprocess import ProgressCallback, noop_progress
from .prompts import unit_instruction
from .schema import ExtractionUnit, SchemaNode, build_model, partition, validate_schema

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
RecordCallback = Callable[[Record], None]


def _ignore_record(record: Record) -> None:
    pass


@dataclass
class ExtractionRun:
    status: Literal["ok", "error"]
    record: Record = field(default_factory=dict)
    error: str | None = None
    failed_unit: str | None = None
    completed_units: List[str] = field(default_factory=list)


class ExtractionOrchestrator:
    """
    Coordinates text acquisition and per-unit extraction.

    Units are processed one at a time in partition order. The merged record is
    published after each unit, so callers see partial output before the run
    finishes and keep it when a later unit fails.
    """

    def __init__(
        self,
        backend: GenerationBackend,
        assembler: DocumentTextAssembler | None = None,
        schema: SchemaNode = LEASE_ABSTRACT_SCHEMA,
    ):
        validate_schema(schema)
        self.backend = backend
        self.assembler = assembler or DocumentTextAssembler()
        self.schema = schema
        self.units: List[ExtractionUnit] = partition(schema)
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def process(
        self,
        documents: Sequence[SourceDocument],
        *,
        on_progress: ProgressCallback = noop_progress,
        on_unit_complete: RecordCallback = _ignore_record,
    ) -> ExtractionRun:
        """
        Run a full extraction over the given documents.

        Acquisition and extraction failures never raise; they are reported on the returned run, which
        still carries everything merged before the failure.
        """
        if self._running:
            raise RuntimeError("An extraction run is already in progress")
        if not documents:
            return ExtractionRun(status="error", error="Please upload one or more lease documents.")

        self._running = True
        try:
            on_progress("Preparing documents...")
            try:
                text = self.assembler.get_text(documents, on_progress)
            except AcquisitionError as exc:
                return ExtractionRun(status="error", error=str(exc))
            return self.extract(text, on_progress=on_progress, on_unit_complete=on_unit_complete)
        finally:
            self._running = False

    def extract(
        self,
        text: str,
        *,
        on_progress: ProgressCallback = noop_progress,
        on_unit_complete: RecordCallback = _ignore_record,
    ) -> ExtractionRun:
        record: Record = {}
        completed: List[str] = []
        for unit in self.units:
            on_progress(f"Extracting: {unit.label}...")
            try:
                fragment = self.extract_unit(unit, text)
            except AbstractionError as exc:
                logger.error("Extraction stopped at %s: %s", unit.label, exc)
                return ExtractionRun(
                    status="error",
                    record=copy.deepcopy(record),
                    error=f'Failed to extract data for "{unit.label}". Please try again.',
                    failed_unit=unit.label,
                    completed_units=completed,
                )
            self._merge(record, unit, fragment)
            completed.append(unit.label)
            on_unit_complete(copy.deepcopy(record))

        logger.info("Extraction finished: %d units", len(completed))
        return ExtractionRun(status="ok", record=record, completed_units=completed)

    def extract_unit(self, unit: ExtractionUnit, text: str) -> Any:
        """Issue one request and return the value for the unit's key."""
        request = GenerationRequest(
            content=text,
            system_instruction=unit_instruction(unit),
            response_shape=unit.response_shape,
        )
        logger.info("Requesting %s", unit.label)
        try:
            response = self.backend.generate(request)
        except AbstractionError:
            raise
        except Exception as exc:
            logger.exception("Generation request failed for %s", unit.label)
            raise GenerationError(unit.label, str(exc)) from exc
        raw = response.text

        if raw is None or not raw.strip():
            if unit.catch_all:
                logger.info("Empty response for %s, using empty value", unit.label)
                return unit.schema.empty_value()
            raise EmptyResponseError(unit.label)

        # fragment must match the unit sub-schema, including array item shapes
        model = build_model(unit.response_shape)
        try:
            fragment = model.model_validate_json(raw)
        except ValidationError as exc:
            logger.debug("Invalid response for %s: %r", unit.label, raw)
            raise MalformedResponseError(unit.label, raw, str(exc)) from exc
        return fragment.model_dump(mode="json", exclude_unset=True)[unit.key]

    def _merge(self, record: Record, unit: ExtractionUnit, value: Any) -> None:
        target = record
        if unit.section is not None:
            target = record.setdefault(unit.section, {})
        target[unit.key] = value
