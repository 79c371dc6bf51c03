"""Display order for archive items."""

from typing import List, Optional, Sequence

from archive_data import ArchiveItem


def sort_nodes_by_tag(items: Sequence[ArchiveItem], tag: Optional[str] = "") -> List[ArchiveItem]:
    """
    Sort items by the selected tag: items whose themes contain the tag come
    first, then the rest. Within each group items sort by display name.
    With no tag, items simply sort by display name. Returns a new list.
    """
    if not tag:
        return sorted(items, key=lambda item: item.display_name)
    return sorted(items, key=lambda item: (tag not in item.themes, item.display_name))
