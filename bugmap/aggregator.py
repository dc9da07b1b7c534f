"""Group decorated files by filename."""

from typing import Dict, Iterable, List

from bugmap.models import DecoratedFileChange


def aggregate(files: Iterable[DecoratedFileChange]) -> Dict[str, List[str]]:
    """Map each filename to the titles of the pull requests that touched it.

    Titles keep encounter order and are not deduplicated.
    """
    grouped: Dict[str, List[str]] = {}
    for f in files:
        grouped.setdefault(f.filename, []).append(f.pull.title)
    return grouped
