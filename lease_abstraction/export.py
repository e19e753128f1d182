from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Mapping

import pandas as pd

from .schema import title_case

logger = logging.getLogger(__name__)

Row = List[str]


def flatten_record(record: Mapping[str, Any]) -> List[Row]:
    """
    Flatten a lease abstract into [field, value] rows.

    Nested keys are joined with " > "; arrays get a header row followed by one
    "[n]" row per item, with the item fields indented.
    """
    rows: List[Row] = []

    def walk(obj: Any, prefix: str = "") -> None:
        if not isinstance(obj, Mapping):
            return
        for key, value in obj.items():
            label = f"{prefix} > {title_case(key)}" if prefix else title_case(key)
            if isinstance(value, list):
                rows.append([label])
                for index, item in enumerate(value, start=1):
                    if isinstance(item, Mapping):
                        rows.append([f"{label} [{index}]"])
                        walk(item, "  ")
                    else:
                        rows.append([f"{label} [{index}]", "" if item is None else str(item)])
            elif isinstance(value, Mapping):
                walk(value, label)
            else:
                rows.append([label, "" if value is None else str(value)])

    walk(record)
    return rows


def to_dataframe(record: Mapping[str, Any]) -> pd.DataFrame:
    rows = [row + [""] * (2 - len(row)) for row in flatten_record(record)]
    return pd.DataFrame(rows, columns=["Field", "Value"])


def to_excel(record: Mapping[str, Any], output_path: Path) -> None:
    """
    Write the abstract to an Excel file with sheet 'Lease Abstract'.
    """
    df = to_dataframe(record)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Writing abstract to %s", output_path)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name="Lease Abstract", index=False)
        sheet = writer.sheets["Lease Abstract"]
        sheet.column_dimensions["A"].width = 45
        sheet.column_dimensions["B"].width = 60


def to_json(record: Mapping[str, Any], output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Writing abstract to %s", output_path)
    output_path.write_text(json.dumps(record, indent=2, ensure_ascii=False), encoding="utf-8")
