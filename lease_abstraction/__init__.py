"""
lease_abstraction: multi-document lease abstraction with an LLM backend.

Text is read from the lease and its amendments (with OCR for scanned pages),
then the abstract schema is extracted one section or clause at a time and
merged into a single record.
"""

__all__ = [
    "assembler",
    "agents",
    "documents",
    "export",
    "orchestrator",
    "preprocess",
    "qa",
    "schema",
]
