"""CSV persistence for extracted records."""

from __future__ import annotations

import csv
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Iterable

from merchantmap.logging_config import get_logger
from merchantmap.models import Record
from merchantmap.normalizers import safe_filename_part

LOGGER = get_logger(__name__)

CSV_HEADER = Record.field_names()
AGGREGATE_CATEGORY = "all"


def output_path(output_dir: str | Path, region: str, category: str) -> Path:
    """Return ``<output_dir>/<region>-<category>.csv``."""

    filename = f"{safe_filename_part(region)}-{safe_filename_part(category)}.csv"
    return Path(output_dir) / filename


def _row_to_values(record: Record) -> list[str]:
    data = record.to_dict()
    return [data[column] for column in CSV_HEADER]


def write_csv(records: Iterable[Record], csv_path: str | Path) -> None:
    path = Path(csv_path)
    os.makedirs(path.parent, exist_ok=True)

    handle = NamedTemporaryFile(
        mode="w", newline="", encoding="utf-8", dir=str(path.parent), delete=False
    )
    try:
        with handle:
            writer = csv.writer(handle)
            writer.writerow(CSV_HEADER)
            for record in records:
                writer.writerow(_row_to_values(record))
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(handle.name, path)
    except BaseException:
        # The target keeps its previous content; only the partial file goes.
        Path(handle.name).unlink(missing_ok=True)
        raise


def read_csv(csv_path: str | Path) -> list[Record]:
    """Load records previously written by :func:`write_csv`."""

    with Path(csv_path).open("r", newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        return [Record(**{column: row[column] for column in CSV_HEADER}) for row in reader]


class CsvRecordWriter:
    """Persist one record list per ``(region, category)`` under *output_dir*."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)
        self.written: list[Path] = []

    def write(self, records: list[Record], region: str, category: str) -> Path:
        path = output_path(self.output_dir, region, category)
        LOGGER.info("Writing %s (%s records)", path, len(records))
        write_csv(records, path)
        self.written.append(path)
        return path

    def write_aggregate(self, records: list[Record], region: str) -> Path:
        return self.write(records, region, AGGREGATE_CATEGORY)


__all__ = [
    "AGGREGATE_CATEGORY",
    "CSV_HEADER",
    "CsvRecordWriter",
    "output_path",
    "read_csv",
    "write_csv",
]
