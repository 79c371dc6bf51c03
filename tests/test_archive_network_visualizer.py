"""Tests for the HTML export and command line."""

import json

import pytest

from archive_network_visualizer import ArchiveNetworkVisualizer, main


class TestCreateVisualization:
    def test_writes_html(self, scenario_data, config, tmp_path):
        output = tmp_path / "network.html"
        visualizer = ArchiveNetworkVisualizer(scenario_data, config, seed=1)
        result = visualizer.create_visualization(str(output), initial_filter="y", max_ticks=400)
        assert result == str(output)
        html = output.read_text(encoding="utf-8")
        assert "var ARCHIVE = " in html
        assert "plotly_hover" in html

    def test_embeds_one_entry_per_filter(self, scenario_data, config, tmp_path):
        output = tmp_path / "network.html"
        ArchiveNetworkVisualizer(scenario_data, config, seed=1).create_visualization(str(output), max_ticks=400)
        html = output.read_text(encoding="utf-8")
        start = html.index("var ARCHIVE = ") + len("var ARCHIVE = ")
        settings = json.loads(html[start:html.index(";\n", start)])
        assert list(settings["filters"]) == ["", "x", "y", "z"]
        assert settings["filters"][""]["count"] == 4
        assert settings["filters"]["y"]["count"] == 2
        # Hovering B in the full graph dims only D
        hover_b = settings["filters"][""]["hover"][1]
        assert hover_b["opacity"] == [1.0, 1.0, 1.0, config.unrelated_opacity]
        assert hover_b["scale"] == [config.connected_scale, config.hover_scale, config.connected_scale, 1.0]

    def test_filter_order_follows_dropdown(self, make_item, config, tmp_path):
        from archive_data import ArchiveData

        items = [make_item("a", themes=["night"]), make_item("b", themes=["2020", "night"])]
        data = ArchiveData(items, {"themes": ["night", "2020"]})
        output = tmp_path / "network.html"
        ArchiveNetworkVisualizer(data, config, seed=1).create_visualization(str(output), max_ticks=50)
        html = output.read_text(encoding="utf-8")
        start = html.index("var ARCHIVE = ") + len("var ARCHIVE = ")
        settings = json.loads(html[start:html.index(";\n", start)])
        assert settings["filterOrder"] == ["", "night", "2020"]
        assert "ARCHIVE.filterOrder[event.active]" in html
        assert "Object.keys(ARCHIVE.filters)" not in html

    def test_unknown_initial_filter_falls_back(self, scenario_data, config, tmp_path):
        output = tmp_path / "network.html"
        ArchiveNetworkVisualizer(scenario_data, config).create_visualization(str(output), initial_filter="nope", max_ticks=50)
        assert '"initialFilter": ""' in output.read_text(encoding="utf-8")

    def test_empty_archive(self, config, tmp_path):
        from archive_data import ArchiveData

        output = tmp_path / "network.html"
        assert ArchiveNetworkVisualizer(ArchiveData([]), config).create_visualization(str(output)) is None
        assert not output.exists()


class TestMain:
    def test_missing_data_fails_without_output(self, tmp_path):
        output = tmp_path / "network.html"
        assert main(["--data", str(tmp_path / "missing.json"), "--output", str(output)]) == 1
        assert not output.exists()

    def test_list_tags(self, archive_file, capsys):
        assert main(["--data", str(archive_file), "--list-tags"]) == 0
        out = capsys.readouterr().out
        assert "water" in out and "city" in out

    def test_bad_config(self, archive_file, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"bogus": 1}), encoding="utf-8")
        assert main(["--data", str(archive_file), "--config", str(config_path)]) == 1

    def test_end_to_end(self, archive_file, tmp_path):
        output = tmp_path / "network.html"
        code = main(["--data", str(archive_file), "--output", str(output),
                     "--max-ticks", "100", "--seed", "2", "--link-distance", "120"])
        assert code == 0
        assert output.exists()

    def test_gui_receives_seed(self, archive_file, monkeypatch):
        gui = pytest.importorskip("archive_network_gui")
        calls = []
        monkeypatch.setattr(gui, "run_gui", lambda data, config, seed=None: calls.append((data, seed)) or 0)
        assert main(["--data", str(archive_file), "--gui", "--seed", "9"]) == 0
        assert calls == [(str(archive_file), 9)]
