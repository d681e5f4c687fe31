"""
Unit tests for the office collaborators.
"""
import pytest
from openpyxl import Workbook

from schemalens.documents import (
    list_spreadsheet_sheets,
    process_document,
    DocumentJobError,
    SUCCESS,
)


@pytest.fixture
def workbook_path(tmp_path):
    wb = Workbook()
    wb.active.title = "Sales Data"
    wb.create_sheet("Customers")
    wb.create_sheet("Q1 Report")
    path = tmp_path / "book.xlsx"
    wb.save(path)
    return path


class TestSpreadsheetSheets:

    def test_sheet_names_in_order(self, workbook_path):
        assert list_spreadsheet_sheets(str(workbook_path)) == ["Sales Data", "Customers", "Q1 Report"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentJobError, match="not found"):
            list_spreadsheet_sheets(str(tmp_path / "missing.xlsx"))

    def test_not_a_workbook(self, tmp_path):
        bogus = tmp_path / "bogus.xlsx"
        bogus.write_text("not a zip")
        with pytest.raises(DocumentJobError, match="Failed to read"):
            list_spreadsheet_sheets(str(bogus))


class TestProcessDocument:

    @pytest.mark.parametrize("mode", ["merge", "split", "compress", "view", "edit"])
    def test_success(self, mode):
        assert process_document(mode, ["a.pdf", "b.pdf"], meta={"quality": "low"}, delay_s=0) == SUCCESS

    def test_edit_carries_metadata(self):
        """Test the metadata-editing job with document properties."""
        meta = {"title": "Quarterly report", "author": "Finance"}
        assert process_document("edit", ["a.pdf"], meta=meta, delay_s=0) == SUCCESS

    def test_unknown_mode(self):
        with pytest.raises(DocumentJobError, match="Unsupported document mode"):
            process_document("shred", ["a.pdf"], delay_s=0)

    def test_no_files(self):
        with pytest.raises(DocumentJobError, match="No files"):
            process_document("merge", [], delay_s=0)
