"""
Tunable parameters for the image archive network.

Defaults match the values the web view shipped with. Any of them can be
overridden from a JSON file (--config) or from the command line.
"""

import json
import os
from typing import Dict


DEFAULTS = {
    # Glyphs
    'node_radius': 36.0,
    'collision_radius_factor': 2.2,
    # Forces
    'link_distance': 180.0,
    'charge_strength': -400.0,
    'center_strength': 0.05,
    'velocity_decay': 0.4,
    'alpha_min': 0.001,
    'drag_alpha_target': 0.3,
    'resize_alpha': 0.3,
    # Hover styling
    'hover_scale': 1.4,
    'connected_scale': 1.1,
    'unrelated_opacity': 0.3,
    'link_opacity': 0.6,
    'dimmed_link_opacity': 0.1,
    'line_color': '#3A86FF',
    'line_color_hover': '#6ba3ff',
    'transition_ms': 200,
    # Viewport
    'parallax_factor': 0.12,
    'default_width': 1200,
    'min_height': 800,
}

COLOR_KEYS = {'line_color', 'line_color_hover'}


class NetworkConfig:
    """Holds layout, styling and viewport parameters"""

    def __init__(self, **overrides):
        for key, value in DEFAULTS.items():
            setattr(self, key, value)
        self.update(overrides)

    def update(self, overrides: Dict[str, object]):
        """Apply overrides, rejecting unknown keys and bad values"""
        for key, value in overrides.items():
            if key not in DEFAULTS:
                raise ValueError(f"Unknown config option: {key}")
            if key in COLOR_KEYS:
                if not isinstance(value, str) or not value.startswith('#'):
                    raise ValueError(f"{key} must be a hex color string, got {value!r}")
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{key} must be a number, got {value!r}")
            setattr(self, key, value)
        return self

    @property
    def alpha_decay(self) -> float:
        # Reaches alpha_min from 1.0 in roughly 300 ticks
        return 1 - self.alpha_min ** (1 / 300)

    @property
    def collision_radius(self) -> float:
        return self.node_radius * self.collision_radius_factor

    def to_dict(self) -> Dict[str, object]:
        return {key: getattr(self, key) for key in DEFAULTS}

    @classmethod
    def from_file(cls, path: str) -> 'NetworkConfig':
        """Load overrides from a JSON object file"""
        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found at: {path}")
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")
        return cls(**data)
