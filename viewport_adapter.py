"""Scroll parallax and resize re-centering for the drawing surface."""

from typing import Tuple

from network_config import NetworkConfig


class ViewportAdapter:
    def __init__(self, config: NetworkConfig = None, width: float = 0, height: float = 0):
        self.config = config or NetworkConfig()
        self.width, self.height = self.dimensions(width, height)
        self.offset = (0.0, 0.0)
        self.on_scroll(0)

    def dimensions(self, width: float, height: float) -> Tuple[float, float]:
        """Drawing surface size: default width when unknown, minimum height"""
        return (width or self.config.default_width,
                max(height or 0, self.config.min_height))

    @property
    def center(self) -> Tuple[float, float]:
        return (self.width / 2, self.height / 2)

    def on_scroll(self, scroll_y: float) -> Tuple[float, float]:
        """Scene translation for a vertical scroll offset; render-only"""
        self.offset = (0.0, float(scroll_y) * self.config.parallax_factor)
        return self.offset

    def on_resize(self, width: float, height: float, layout=None) -> Tuple[float, float]:
        self.width, self.height = self.dimensions(width, height)
        if layout is not None and not layout.disposed:
            layout.set_center(*self.center)
        return (self.width, self.height)
