"""Tests for the inventory collector and export."""

import csv
import io
import sqlite3
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock

import pytest

from auditor.exceptions import InventoryError, SiteNotFoundError
from auditor.repositories.attachment_repository import AttachmentRepository
from auditor.services.inventory_service import InventoryService
from auditor.site_context import SiteContext


def write_file(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"%" * size)
    return path


@pytest.fixture
def context():
    return SiteContext()


@pytest.fixture
def service(context):
    return InventoryService(context=context)


def _add_pdf(site, title, post_date, attached_file, mime_type="application/pdf"):
    return AttachmentRepository.create_attachment(site.site_id, title, mime_type, post_date, attached_file)


def test_empty_site(service, main_site, uploads_root):
    assert service.collect(main_site.site_id) == []


def test_files_are_sized_and_ordered_newest_first(service, main_site, uploads_root):
    write_file(uploads_root / "2024" / "01" / "small.pdf", 500)
    write_file(uploads_root / "2024" / "02" / "big.pdf", 2_000_000)
    _add_pdf(main_site, "Small", "2024-01-10 09:00:00", "2024/01/small.pdf")
    _add_pdf(main_site, "Big", "2024-02-10 09:00:00", "2024/02/big.pdf")

    entries = service.collect(main_site.site_id)

    assert [e.filename for e in entries] == ["big.pdf", "small.pdf"]
    assert entries[0].file_size == "1.91 MB"
    assert entries[0].file_size_raw == 2_000_000
    assert entries[1].file_size == "500 B"
    assert entries[1].url == "https://example.com/wp-content/uploads/2024/01/small.pdf"
    assert entries[1].upload_date == "2024-01-10 09:00:00"


def test_missing_file_gets_sentinel(service, main_site, uploads_root):
    _add_pdf(main_site, "Gone", "2024-01-01 10:00:00", "2024/01/gone.pdf")

    [entry] = service.collect(main_site.site_id)

    assert entry.file_size == "Missing file"
    assert entry.file_size_raw == 0
    assert entry.filename == "gone.pdf"
    assert entry.url == "https://example.com/wp-content/uploads/2024/01/gone.pdf"


def test_unreadable_size_counts_as_zero(service, main_site, uploads_root, monkeypatch):
    write_file(uploads_root / "a.pdf", 10)
    _add_pdf(main_site, "A", "2024-01-01 10:00:00", "a.pdf")

    def fail(path):
        raise PermissionError(path)

    monkeypatch.setattr("auditor.services.inventory_service.os.path.getsize", fail)

    [entry] = service.collect(main_site.site_id)
    assert entry.file_size == "0 B"
    assert entry.file_size_raw == 0


def test_only_pdfs_are_listed(service, main_site, uploads_root):
    write_file(uploads_root / "a.pdf", 10)
    write_file(uploads_root / "b.png", 10)
    _add_pdf(main_site, "A", "2024-01-01 10:00:00", "a.pdf", mime_type="Application/PDF")
    _add_pdf(main_site, "B", "2024-01-02 10:00:00", "b.png", mime_type="image/png")

    entries = service.collect(main_site.site_id)
    assert [e.filename for e in entries] == ["a.pdf"]


def test_sub_site_reads_its_own_uploads(service, sub_site, uploads_root):
    write_file(uploads_root / "sites" / str(sub_site.site_id) / "2024" / "03" / "team.pdf", 2048)
    _add_pdf(sub_site, "Team", "2024-03-01 08:00:00", "2024/03/team.pdf")

    [entry] = service.collect(sub_site.site_id)

    assert entry.file_size == "2 KB"
    assert entry.url == (
        f"https://example.com/team/wp-content/uploads/sites/{sub_site.site_id}/2024/03/team.pdf"
    )


def test_context_restored_after_collection(service, context, sub_site, uploads_root):
    service.collect(sub_site.site_id)

    assert context.current_site_id == 1
    assert context.depth == 0


def test_context_restored_when_query_raises(service, context, sub_site, uploads_root):
    service.attachment_repo = Mock()
    service.attachment_repo.get_by_mime_type.side_effect = sqlite3.OperationalError("no such table")

    with pytest.raises(InventoryError) as exc_info:
        service.list_inventory(sub_site.site_id)

    assert exc_info.value.code == "ERROR_LOADING"
    assert str(exc_info.value) == "Error loading PDFs"
    assert context.current_site_id == 1
    assert context.depth == 0


def test_unknown_site_never_switches(main_site, uploads_root):
    context = Mock(wraps=SiteContext())
    service = InventoryService(context=context)

    with pytest.raises(SiteNotFoundError, match="Invalid site."):
        service.list_inventory(999)

    context.switched_to.assert_not_called()


def test_export(service, main_site, uploads_root):
    write_file(uploads_root / "r.pdf", 1536)
    _add_pdf(main_site, "R", "2024-05-01 12:00:00", "r.pdf")

    export = service.export_inventory(main_site.site_id, today=datetime(2026, 10, 18))

    assert export.filename == "Main-Site-WordPress-PDF-listing-2026-10-18.csv"
    assert export.content.startswith(b"\xef\xbb\xbf")
    rows = list(csv.reader(io.StringIO(export.content.decode("utf-8-sig"))))
    assert rows == [
        ["Filename", "Direct Link", "Upload Date", "File Size"],
        ["r.pdf", "https://example.com/wp-content/uploads/r.pdf", "2024-05-01 12:00:00", "1.5 KB"],
    ]


def test_export_failure_is_wrapped(service, context, main_site, uploads_root):
    service.attachment_repo = Mock()
    service.attachment_repo.get_by_mime_type.side_effect = RuntimeError("disk on fire")

    with pytest.raises(InventoryError) as exc_info:
        service.export_inventory(main_site.site_id)

    assert exc_info.value.code == "ERROR_GENERATING"
    assert context.depth == 0


def test_export_unknown_site(service, test_db):
    with pytest.raises(SiteNotFoundError):
        service.export_inventory(5)
