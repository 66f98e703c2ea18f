"""
Readers for the restaurant's data files.

The session state only consumes plain rows and a block of text; this module
turns the catalog CSV, the schedule CSV and the info document (PDF or plain
text) into exactly that.
"""
import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from pypdf import PdfReader
from pypdf.errors import PyPdfError

from logger_config import get_logger
from restaurant_config import Settings
from restaurant_errors import LoadError

logger = get_logger()


@dataclass
class RestaurantData:
    catalog_rows: List[Dict[str, str]]
    schedule_rows: List[Dict[str, str]]
    info_text: str


def read_csv_rows(path: Path) -> List[Dict[str, str]]:
    """Read a CSV file into dicts with trimmed header names and values. Blank lines are skipped."""
    rows: List[Dict[str, str]] = []
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None:
            return rows
        reader.fieldnames = [str(h or "").strip() for h in reader.fieldnames]
        for raw in reader:
            row = {k: str(v or "").strip() for k, v in raw.items() if k}
            if not any(row.values()):
                continue
            rows.append(row)
    return rows


def read_pdf_text(path: Path) -> str:
    reader = PdfReader(str(path))
    parts = [(page.extract_text() or "").strip() for page in reader.pages]
    return " ".join(p for p in parts if p).strip()


def read_info_text(path: Path) -> str:
    if path.suffix.lower() == ".pdf":
        return read_pdf_text(path)
    return path.read_text(encoding="utf-8").strip()


class RestaurantDataSource:
    def __init__(self, catalog_path: Path, schedule_path: Path, info_path: Path) -> None:
        self.catalog_path = Path(catalog_path)
        self.schedule_path = Path(schedule_path)
        self.info_path = Path(info_path)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RestaurantDataSource":
        return cls(settings.catalog_path, settings.schedule_path, settings.info_path)

    def read(self) -> RestaurantData:
        """
        Read all three sources.

        Raises:
            LoadError: if a file is missing or cannot be parsed.
        """
        try:
            info_text = read_info_text(self.info_path)
        except (OSError, UnicodeDecodeError, PyPdfError) as e:
            raise LoadError(str(e), source=self.info_path.name) from e
        try:
            catalog_rows = read_csv_rows(self.catalog_path)
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise LoadError(str(e), source=self.catalog_path.name) from e
        try:
            schedule_rows = read_csv_rows(self.schedule_path)
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise LoadError(str(e), source=self.schedule_path.name) from e
        logger.info(
            f"Read restaurant data: {len(catalog_rows)} catalog rows from {self.catalog_path}, "
            f"{len(schedule_rows)} schedule rows from {self.schedule_path}, info from {self.info_path}"
        )
        return RestaurantData(catalog_rows=catalog_rows, schedule_rows=schedule_rows, info_text=info_text)
