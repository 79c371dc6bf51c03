"""
Load the image archive document (data.json) and normalize its nodes.

The document is a JSON object with a "nodes" list. Each node needs an "id" and
an "image"; "source", "name", "themes" and "moods" are optional. An optional
"meta" object may list the known theme and mood strings for reference.
"""

import json
import os
from typing import Dict, List, Optional

import requests


class DataLoadError(Exception):
    """The archive document could not be fetched or parsed"""


class ArchiveItem:
    """One image in the archive, plus its mutable layout position"""

    def __init__(self, id: str, image: str, source: Optional[str] = None,
                 name: Optional[str] = None, themes=(), moods=()):
        self.id = id
        self.image = image
        self.source = source
        self.themes = tuple(themes)
        self.moods = tuple(moods)
        self.name = name or ', '.join(self.themes + self.moods)

        # Layout only
        self.x = None
        self.y = None
        self.fx = None
        self.fy = None

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def __repr__(self):
        return f"ArchiveItem({self.id!r})"


class ArchiveData:
    """Normalized contents of an archive document"""

    def __init__(self, items: List[ArchiveItem], meta: Dict[str, list] = None, skipped: int = 0):
        self.items = items
        self.meta = meta or {}
        self.skipped = skipped

    def __len__(self):
        return len(self.items)


def _string_list(value) -> List[str]:
    if not isinstance(value, list):
        return []
    return [tag for tag in value if isinstance(tag, str)]


def parse_archive(raw) -> ArchiveData:
    """Turn a decoded document into ArchiveItems, skipping malformed entries"""
    if not isinstance(raw, dict):
        raise DataLoadError("Archive document must be a JSON object")

    nodes = raw.get('nodes', [])
    if not isinstance(nodes, list):
        raise DataLoadError("Archive document 'nodes' must be a list")

    items = []
    seen = set()
    skipped = 0

    for index, entry in enumerate(nodes):
        if not isinstance(entry, dict):
            print(f"  Note: skipping node #{index}: not an object")
            skipped += 1
            continue

        node_id = entry.get('id')
        image = entry.get('image')
        if not isinstance(node_id, str) or not node_id:
            print(f"  Note: skipping node #{index}: missing 'id'")
            skipped += 1
            continue
        if not isinstance(image, str) or not image:
            print(f"  Note: skipping node {node_id}: missing 'image'")
            skipped += 1
            continue
        if node_id in seen:
            print(f"  Note: skipping node {node_id}: duplicate id")
            skipped += 1
            continue
        seen.add(node_id)

        source = entry.get('source')
        name = entry.get('name')
        items.append(ArchiveItem(
            id=node_id,
            image=image,
            source=source if isinstance(source, str) and source else None,
            name=name if isinstance(name, str) else None,
            themes=_string_list(entry.get('themes')),
            moods=_string_list(entry.get('moods')),
        ))

    meta = {}
    raw_meta = raw.get('meta')
    if isinstance(raw_meta, dict):
        for key in ('themes', 'moods'):
            if key in raw_meta:
                meta[key] = _string_list(raw_meta[key])

    return ArchiveData(items, meta, skipped)


def load_archive(location: str, timeout: float = 10) -> ArchiveData:
    """Load an archive document from a local path or an http(s) URL"""
    if location.startswith(('http://', 'https://')):
        try:
            response = requests.get(location, timeout=timeout)
            response.raise_for_status()
            raw = response.json()
        except requests.RequestException as e:
            raise DataLoadError(f"Failed to load {location}: {e}") from e
        except ValueError as e:
            raise DataLoadError(f"Failed to parse {location}: {e}") from e
    else:
        if not os.path.exists(location):
            raise DataLoadError(f"Archive document not found at: {location}")
        try:
            with open(location, 'r', encoding='utf-8') as f:
                raw = json.load(f)
        except OSError as e:
            raise DataLoadError(f"Failed to read {location}: {e}") from e
        except ValueError as e:
            raise DataLoadError(f"Failed to parse {location}: {e}") from e

    return parse_archive(raw)
