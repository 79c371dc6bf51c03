"""Tests for scroll parallax and resize handling."""

import pytest

from force_layout import ForceLayoutController
from viewport_adapter import ViewportAdapter


class TestViewportAdapter:
    def test_default_dimensions(self, config):
        viewport = ViewportAdapter(config)
        assert (viewport.width, viewport.height) == (1200, 800)
        assert viewport.center == (600, 400)

    def test_minimum_height(self, config):
        viewport = ViewportAdapter(config, 1000, 300)
        assert (viewport.width, viewport.height) == (1000, 800)

    def test_parallax_offset(self, config):
        viewport = ViewportAdapter(config)
        assert viewport.offset == (0.0, 0.0)
        assert viewport.on_scroll(100) == (0.0, pytest.approx(12.0))
        assert viewport.on_scroll(100) == viewport.offset

    def test_resize_recenters_layout(self, scenario_items, config):
        viewport = ViewportAdapter(config)
        layout = ForceLayoutController(scenario_items, [], config, center=viewport.center)
        layout.run(1000)
        assert viewport.on_resize(2000, 1200, layout) == (2000, 1200)
        assert (layout.center_x, layout.center_y) == (1000, 600)
        assert layout.alpha == config.resize_alpha
        assert layout.active

    def test_resize_ignores_disposed_layout(self, scenario_items, config):
        viewport = ViewportAdapter(config)
        layout = ForceLayoutController(scenario_items, [], config, center=viewport.center)
        layout.dispose()
        viewport.on_resize(2000, 1200, layout)
        assert (layout.center_x, layout.center_y) == (600, 400)
