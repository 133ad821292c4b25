"""Tests for the per-site execution context."""

import threading
from datetime import datetime
from pathlib import Path

import pytest

from auditor.repositories.site_repository import Site
from auditor.site_context import SiteContext, site_scope


def _site(site_id, path="/"):
    return Site(site_id=site_id, domain="example.com", path=path, blogname=f"Site {site_id}",
                registered=datetime(2024, 1, 1))


def test_starts_on_main_site():
    context = SiteContext()
    assert context.current_site_id == 1
    assert context.depth == 0


def test_switch_and_restore():
    context = SiteContext()

    with context.switched_to(_site(2)) as scope:
        assert context.current_site_id == 2
        assert context.depth == 1
        assert scope.posts_table == "wp_2_posts"

    assert context.current_site_id == 1
    assert context.depth == 0


def test_restored_when_block_raises():
    context = SiteContext()

    with pytest.raises(RuntimeError):
        with context.switched_to(_site(3)):
            raise RuntimeError("query failed")

    assert context.current_site_id == 1
    assert context.depth == 0


def test_nested_switches_restore_in_order():
    context = SiteContext()

    with context.switched_to(_site(2)):
        with context.switched_to(_site(3)):
            assert context.current_site_id == 3
            assert context.depth == 2
        assert context.current_site_id == 2

    assert context.current_site_id == 1


def test_switch_window_excludes_other_threads():
    context = SiteContext()
    a_entered = threading.Event()
    a_release = threading.Event()
    b_entered = threading.Event()
    seen = {}

    def hold_site_2():
        with context.switched_to(_site(2)):
            a_entered.set()
            a_release.wait(5)
            seen["a_exiting"] = context.current_site_id

    def switch_to_site_3():
        with context.switched_to(_site(3)):
            b_entered.set()
            seen["b_current"] = context.current_site_id
            seen["b_depth"] = context.depth

    a = threading.Thread(target=hold_site_2)
    a.start()
    assert a_entered.wait(5)

    b = threading.Thread(target=switch_to_site_3)
    b.start()
    assert not b_entered.wait(0.2)
    assert context.current_site_id == 2

    a_release.set()
    a.join(5)
    b.join(5)

    assert b_entered.is_set()
    assert seen == {"a_exiting": 2, "b_current": 3, "b_depth": 1}
    assert context.current_site_id == 1
    assert context.depth == 0


def test_main_site_scope(uploads_root):
    scope = site_scope(_site(1))

    assert scope.posts_table == "wp_posts"
    assert scope.uploads_dir == Path(uploads_root)
    assert scope.uploads_url == "https://example.com/wp-content/uploads"


def test_sub_site_scope(uploads_root):
    scope = site_scope(_site(4, path="/team/"))

    assert scope.uploads_dir == Path(uploads_root) / "sites" / "4"
    assert scope.uploads_url == "https://example.com/team/wp-content/uploads/sites/4"
    assert scope.attachment_url("2024/01/a.pdf") == \
        "https://example.com/team/wp-content/uploads/sites/4/2024/01/a.pdf"
    assert scope.attachment_path("2024/01/a.pdf") == str(Path(uploads_root) / "sites" / "4" / "2024" / "01" / "a.pdf")


def test_attachment_without_file_falls_back_to_guid(uploads_root):
    scope = site_scope(_site(1))

    assert scope.attachment_path("") == ""
    assert scope.attachment_url("", guid="https://cdn.example.com/x.pdf") == "https://cdn.example.com/x.pdf"
