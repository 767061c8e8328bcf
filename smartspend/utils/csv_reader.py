"""
CSV upload reader
Turns an uploaded delimited file into one raw record per data row
"""
import csv
import io
import logging
from typing import Dict, List

logger = logging.getLogger(__name__)


def decode_upload(content: bytes) -> str:
    # utf-8-sig drops the BOM that spreadsheet exports often prepend
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def read_csv_records(content: bytes) -> List[Dict[str, str]]:
    """
    Parse CSV bytes using the first row as the header.
    Header names and cells are trimmed, blank lines are skipped and column order
    is preserved so the first column stays first in every record.
    """
    reader = csv.reader(io.StringIO(decode_upload(content)))

    header: List[str] = []
    records: List[Dict[str, str]] = []
    for row in reader:
        cells = [cell.strip() for cell in row]
        if not any(cells):
            continue
        if not header:
            header = cells
            continue
        records.append({
            column: cells[index] if index < len(cells) else ""
            for index, column in enumerate(header)
        })

    logger.info(f"Parsed {len(records)} CSV rows with columns {header}")
    return records
