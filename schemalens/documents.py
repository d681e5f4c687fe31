"""
Office collaborators: spreadsheet sheet listing and the document job.

Both are boundary-only. Sheet contents are never read and the document job is
an opaque blocking step with a single success/failure outcome.
"""
import time
from pathlib import Path
from typing import Optional, List, Dict, Any

from openpyxl import load_workbook

from .logger import logger

SUCCESS = "Success"

DOCUMENT_MODES = ("merge", "split", "compress", "view", "edit")


class DocumentJobError(Exception):
    """Raised when a spreadsheet or document job cannot run."""
    pass


def list_spreadsheet_sheets(file_name: str) -> List[str]:
    """
    Sheet names of an .xlsx/.xlsm workbook, in workbook order.

    Raises:
        DocumentJobError: If the file is missing or not a readable workbook
    """
    path = Path(file_name)
    logger.info(f"Parsing spreadsheet: {path}")
    if not path.exists():
        raise DocumentJobError(f"Spreadsheet not found: {file_name}")

    try:
        wb = load_workbook(path, read_only=True)
    except Exception as e:
        raise DocumentJobError(f"Failed to read spreadsheet '{file_name}': {e}") from e

    try:
        return list(wb.sheetnames)
    finally:
        wb.close()


def process_document(
    mode: str,
    files: List[str],
    meta: Optional[Dict[str, Any]] = None,
    delay_s: float = 1.0
) -> str:
    """
    Run the document job. Blocks for ``delay_s`` and returns ``"Success"``.

    No progress, partial results or retries.

    Raises:
        DocumentJobError: On an unknown mode or an empty file list
    """
    if mode not in DOCUMENT_MODES:
        raise DocumentJobError(f"Unsupported document mode: {mode}")
    if not files:
        raise DocumentJobError("No files given")

    logger.info(f"Processing documents: mode={mode}, files={files}, meta={meta}")
    time.sleep(delay_s)
    return SUCCESS
