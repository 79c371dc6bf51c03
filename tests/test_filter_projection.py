"""Tests for display ordering and theme filter projection."""

from archive_data import ArchiveData
from filter_projection import apply_theme_filter, available_filters, project
from tag_ordering import sort_nodes_by_tag


def _ids(items):
    return [item.id for item in items]


class TestOrdering:
    """Matches first, then by display name."""

    def test_no_tag_sorts_by_display_name(self, make_item):
        items = [make_item("1", name="beta"), make_item("2", name="Alpha"), make_item("3", name="alpha")]
        ordered = sort_nodes_by_tag(items, "")
        assert [item.display_name for item in ordered] == sorted(item.display_name for item in items)
        # Case-sensitive: uppercase before lowercase
        assert _ids(ordered) == ["2", "3", "1"]

    def test_tag_partitions_matches_first(self, make_item):
        items = [
            make_item("a", themes=["x"], name="Zed"),
            make_item("b", themes=["y"], name="Abe"),
            make_item("c", themes=["y", "x"], name="Mia"),
            make_item("d", moods=["y"], name="Bo"),
        ]
        assert _ids(sort_nodes_by_tag(items, "y")) == ["b", "c", "d", "a"]

    def test_idempotent(self, scenario_items):
        once = sort_nodes_by_tag(scenario_items, "y")
        assert _ids(sort_nodes_by_tag(once, "y")) == _ids(once)

    def test_does_not_mutate_input(self, scenario_items):
        original = list(scenario_items)
        sort_nodes_by_tag(scenario_items, "y")
        assert scenario_items == original

    def test_display_name_falls_back_to_id(self, make_item):
        items = [make_item("zz"), make_item("aa")]
        assert _ids(sort_nodes_by_tag(items, "")) == ["aa", "zz"]


class TestProjection:
    """Filter, order, then link."""

    def test_scenario_filter_y(self, scenario_items):
        projection = project(scenario_items, "y")
        assert _ids(projection.nodes) == ["B", "C"]
        assert projection.links == [("B", "C")]

    def test_no_tag_keeps_everything(self, scenario_items):
        projection = project(list(reversed(scenario_items)), "")
        assert _ids(projection.nodes) == ["A", "B", "C", "D"]
        assert len(projection.links) == 2

    def test_only_theme_matches_selected(self, make_item):
        items = [make_item("a", themes=["x"]), make_item("b", moods=["x"])]
        assert _ids(apply_theme_filter(items, "x")) == ["a"]

    def test_links_reference_projected_nodes(self, scenario_items):
        for tag in ["", "x", "y", "z", "missing"]:
            projection = project(scenario_items, tag)
            ids = set(projection.node_ids)
            assert len(ids) == len(projection.nodes)
            for source, target in projection.links:
                assert source in ids and target in ids

    def test_unknown_tag_is_empty(self, scenario_items):
        projection = project(scenario_items, "missing")
        assert projection.nodes == []
        assert projection.links == []

    def test_item_without_themes_never_matches(self, make_item):
        items = [make_item("bare", moods=["x"]), make_item("a", themes=["x"])]
        assert _ids(project(items, "x").nodes) == ["a"]


class TestAvailableFilters:
    def test_meta_themes_win(self, scenario_items):
        data = ArchiveData(scenario_items, meta={"themes": ["y", "x", "y"]})
        assert available_filters(data) == ["y", "x"]

    def test_falls_back_to_item_themes(self, scenario_items):
        assert available_filters(ArchiveData(scenario_items)) == ["x", "y", "z"]
