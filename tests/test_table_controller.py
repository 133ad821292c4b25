"""Tests for the per-site PDF table controller."""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from prompt_toolkit import HTML

from common.types import InventoryEntry, SiteSummary
from cli.auditor_client import AuditorRequestError
from cli.constants import STRINGS
from cli.table_controller import (
    SectionState,
    TableController,
    date_key,
    natural_key,
    sort_entries,
)


def entry(filename, upload_date="2024-01-01 00:00:00", size=0):
    return InventoryEntry(
        filename=filename,
        url=f"https://example.com/wp-content/uploads/{filename}",
        upload_date=upload_date,
        file_size=f"{size} B",
        file_size_raw=size,
    )


ENTRIES = [
    entry("file10.pdf", "2024-03-01 00:00:00", 300),
    entry("file2.pdf", "2024-02-01 00:00:00", 100),
    entry("file1.pdf", "2024-01-01 00:00:00", 200),
]


@pytest.fixture
def client():
    client = Mock()
    client.fetch_inventory = AsyncMock(return_value=list(ENTRIES))
    client.export_inventory = AsyncMock(return_value=("Main-Site.csv", "\ufeffFilename,Direct Link,Upload Date,File Size\n"))
    return client


@pytest.fixture
def controller(client):
    return TableController(client)


async def load(controller, site_id=2):
    task = controller.toggle_site(site_id)
    await task
    return controller.sections[site_id]


def indicators(markup):
    return markup.count("▲") + markup.count("▼")


class TestSortKeys:

    def test_natural_filename_order(self):
        names = ["file10.pdf", "File2.pdf", "file1.pdf"]
        assert sorted(names, key=natural_key) == ["file1.pdf", "File2.pdf", "file10.pdf"]

    def test_unparsable_date_sorts_earliest(self):
        entries = [entry("a", "2024-01-01 00:00:00"), entry("b", "not a date")]
        assert [e.filename for e in sort_entries(entries, "upload_date", True)] == ["b", "a"]

    def test_timezone_aware_dates_compare(self):
        assert date_key("2024-01-01T10:00:00+02:00") < date_key("2024-01-01 09:00:00")

    def test_unknown_key(self):
        with pytest.raises(ValueError):
            sort_entries([], "url", True)


class TestLoading:

    @pytest.mark.asyncio
    async def test_first_expand_fetches(self, controller, client):
        section = await load(controller)

        assert section.state == SectionState.LOADED
        assert section.loading is False
        assert [e.filename for e in section.entries] == ["file10.pdf", "file2.pdf", "file1.pdf"]
        client.fetch_inventory.assert_awaited_once_with(2)

    @pytest.mark.asyncio
    async def test_repeated_expand_while_loading_fetches_once(self, controller, client):
        release = asyncio.Event()

        async def slow_fetch(site_id):
            await release.wait()
            return list(ENTRIES)

        client.fetch_inventory = AsyncMock(side_effect=slow_fetch)

        task = controller.toggle_site(2)
        section = controller.sections[2]
        assert section.loading is True
        assert section.state == SectionState.LOADING
        assert STRINGS["loading_pdfs"] in controller.render_site(2)

        assert controller.toggle_site(2) is None
        assert section.expanded is False
        assert controller.toggle_site(2) is None
        assert section.expanded is True

        release.set()
        await task

        client.fetch_inventory.assert_awaited_once_with(2)
        assert section.loading is False

    @pytest.mark.asyncio
    async def test_loaded_section_is_not_fetched_again(self, controller, client):
        await load(controller)

        controller.toggle_site(2)
        assert controller.toggle_site(2) is None

        client.fetch_inventory.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_is_shown_and_not_retried(self, controller, client):
        client.fetch_inventory = AsyncMock(side_effect=AuditorRequestError("Invalid site."))

        section = await load(controller)

        assert section.error == "Invalid site."
        assert section.loading is False
        assert "<error>Invalid site.</error>" in controller.render_site(2)

        controller.toggle_site(2)
        controller.toggle_site(2)
        client.fetch_inventory.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unexpected_failure_shows_generic_message(self, controller, client):
        client.fetch_inventory = AsyncMock(side_effect=RuntimeError("boom"))

        section = await load(controller)

        assert section.error == STRINGS["error_loading"]

    @pytest.mark.asyncio
    async def test_on_update_called_when_settled(self, client):
        updates = []
        controller = TableController(client, on_update=updates.append)

        await load(controller, 5)

        assert updates == [5]


class TestSorting:

    @pytest.mark.asyncio
    async def test_filename_toggle(self, controller):
        section = await load(controller)

        state = controller.handle_sort(2, "filename")
        assert state.ascending is True
        assert [e.filename for e in section.entries] == ["file1.pdf", "file2.pdf", "file10.pdf"]

        state = controller.handle_sort(2, "filename")
        assert state.ascending is False
        assert [e.filename for e in section.entries] == ["file10.pdf", "file2.pdf", "file1.pdf"]

        state = controller.handle_sort(2, "filename")
        assert state.ascending is True
        assert [e.filename for e in section.entries] == ["file1.pdf", "file2.pdf", "file10.pdf"]

    @pytest.mark.asyncio
    async def test_first_date_sort_is_ascending(self, controller):
        section = await load(controller)

        state = controller.handle_sort(2, "upload_date")

        assert state.ascending is True
        assert [e.filename for e in section.entries] == ["file1.pdf", "file2.pdf", "file10.pdf"]

    @pytest.mark.asyncio
    async def test_switching_column_resets_to_ascending(self, controller):
        section = await load(controller)

        controller.handle_sort(2, "filename")
        controller.handle_sort(2, "filename")
        state = controller.handle_sort(2, "file_size_raw")

        assert state.ascending is True
        assert [e.file_size_raw for e in section.entries] == [100, 200, 300]

    @pytest.mark.asyncio
    async def test_single_indicator(self, controller):
        await load(controller)

        markup = controller.render_site(2)
        assert indicators(markup) == 1
        assert "Upload Date ▼" in markup

        controller.handle_sort(2, "file_size_raw")
        markup = controller.render_site(2)
        assert indicators(markup) == 1
        assert "File Size ▲" in markup

    def test_sort_before_load(self, controller):
        assert controller.handle_sort(2, "filename") is None


class TestRendering:

    @pytest.mark.asyncio
    async def test_values_are_escaped(self, controller, client):
        client.fetch_inventory = AsyncMock(return_value=[entry("<script>&.pdf")])

        await load(controller)
        markup = controller.render_site(2)

        assert "&lt;script&gt;&amp;.pdf" in markup
        assert "<script>" not in markup
        HTML(markup)

    @pytest.mark.asyncio
    async def test_empty_site(self, controller, client):
        client.fetch_inventory = AsyncMock(return_value=[])

        await load(controller)

        assert STRINGS["no_pdfs"] in controller.render_site(2)
        assert controller.handle_sort(2, "filename") is None

    @pytest.mark.asyncio
    async def test_site_name_in_heading(self, controller):
        controller.remember_sites([SiteSummary(site_id=2, blogname="Tom & Co", domain="example.com", path="/")])

        await load(controller)

        assert "Site 2: Tom &amp; Co" in controller.render_site(2)

    def test_not_loaded(self, controller):
        assert "expand 7" in controller.render_site(7)


class TestExport:

    @pytest.mark.asyncio
    async def test_writes_csv(self, controller, tmp_path):
        message = await controller.export_site(2, tmp_path / "out")

        output = tmp_path / "out" / "Main-Site.csv"
        assert message == f"Saved {output}"
        assert output.read_bytes().startswith(b"\xef\xbb\xbfFilename,")
        assert controller.sections[2].exporting is False

    @pytest.mark.asyncio
    async def test_failure_message(self, controller, client, tmp_path):
        client.export_inventory = AsyncMock(side_effect=AuditorRequestError(STRINGS["permission_denied"]))

        message = await controller.export_site(2, tmp_path)

        assert message == f"Export failed: {STRINGS['permission_denied']}"
        assert controller.sections[2].exporting is False

    @pytest.mark.asyncio
    async def test_server_filename_cannot_escape_output_dir(self, controller, client, tmp_path):
        client.export_inventory = AsyncMock(return_value=("../evil.csv", "x"))

        await controller.export_site(2, tmp_path / "out")

        assert (tmp_path / "out" / "evil.csv").exists()
        assert not (tmp_path / "evil.csv").exists()
