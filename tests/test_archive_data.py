"""Tests for loading and normalizing the archive document."""

import pytest
import requests

import archive_data
from archive_data import ArchiveItem, DataLoadError, load_archive, parse_archive


class TestParseArchive:
    """Malformed entries are skipped or coerced, never invented."""

    def test_keeps_valid_entries_in_order(self, raw_archive):
        data = parse_archive(raw_archive)
        assert [item.id for item in data.items] == ["harbor", "shore", "static"]

    def test_skips_malformed_and_duplicate_entries(self, raw_archive):
        data = parse_archive(raw_archive)
        # orphan (no id), noimage, duplicate harbor, non-object
        assert data.skipped == 4
        assert data.items[0].image == "harbor.png"

    def test_coerces_tag_lists(self, raw_archive):
        static = parse_archive(raw_archive).items[2]
        assert static.themes == ()
        assert static.moods == ("tense",)

    def test_derives_name_from_tags(self, raw_archive):
        harbor, shore, static = parse_archive(raw_archive).items
        assert harbor.name == "water, city, calm"
        assert shore.name == "Shore"
        assert static.display_name == "tense"

    def test_optional_source(self, raw_archive):
        harbor, shore, _ = parse_archive(raw_archive).items
        assert harbor.source == "https://example.org/harbor"
        assert shore.source is None

    def test_meta_lists(self, raw_archive):
        assert parse_archive(raw_archive).meta == {"themes": ["water", "city"], "moods": ["calm"]}

    def test_missing_nodes_is_empty(self):
        assert len(parse_archive({})) == 0

    @pytest.mark.parametrize("raw", [[], "nodes", {"nodes": {"id": "a"}}])
    def test_bad_structure_raises(self, raw):
        with pytest.raises(DataLoadError):
            parse_archive(raw)

    def test_layout_fields_start_unset(self):
        item = ArchiveItem("a", "a.png")
        assert (item.x, item.y, item.fx, item.fy) == (None, None, None, None)
        assert item.display_name == "a"


class TestLoadArchive:
    def test_loads_local_file(self, archive_file):
        data = load_archive(str(archive_file))
        assert len(data) == 3

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError, match="not found"):
            load_archive(str(tmp_path / "nope.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DataLoadError, match="parse"):
            load_archive(str(path))

    def test_remote_document(self, monkeypatch, raw_archive):
        class FakeResponse:
            def raise_for_status(self):
                pass

            def json(self):
                return raw_archive

        calls = []

        def fake_get(url, timeout):
            calls.append((url, timeout))
            return FakeResponse()

        monkeypatch.setattr(archive_data.requests, "get", fake_get)
        data = load_archive("https://example.org/data.json", timeout=3)
        assert calls == [("https://example.org/data.json", 3)]
        assert len(data) == 3

    def test_unreachable_remote_document(self, monkeypatch):
        def fake_get(url, timeout):
            raise requests.ConnectionError("connection refused")

        monkeypatch.setattr(archive_data.requests, "get", fake_get)
        with pytest.raises(DataLoadError, match="Failed to load"):
            load_archive("http://unreachable.invalid/data.json")
