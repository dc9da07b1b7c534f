"""Match pull request titles against the known bug identifiers.

A title is kept when it carries no bug identifier at all, or when one of the
identifiers it carries is on the allow-list. Titles referencing only unknown
bugs are dropped.

Unless a project prefix is configured, only the prefixes present in the
allow-list count as bug identifiers, so terms such as UTF-8 or SHA-256 are
not mistaken for bugs.
"""

import re
from typing import AbstractSet, Iterable, List, Pattern

from bugmap.models import PullRequestSummary

# Project prefix, dash, numeric suffix: PROJECT-1234
BUG_ID_PATTERN: Pattern[str] = re.compile(r"\b[A-Z][A-Z0-9]+-\d+\b")


def allow_list_prefixes(known_ids: Iterable[str]) -> List[str]:
    """Project prefixes of the well-formed ids in known_ids, sorted."""
    return sorted({bug_id.rsplit("-", 1)[0] for bug_id in known_ids if BUG_ID_PATTERN.fullmatch(bug_id)})


def bug_id_pattern(prefix: str | None = None, known_ids: Iterable[str] = ()) -> Pattern[str]:
    """Return the identifier pattern.

    An explicit prefix wins. Otherwise the prefixes of known_ids are used;
    with an empty allow-list any PREFIX-123 token counts.
    """
    if prefix:
        return re.compile(rf"\b{re.escape(prefix.strip())}-\d+\b")
    prefixes = allow_list_prefixes(known_ids)
    if not prefixes:
        return BUG_ID_PATTERN
    # Longest first so PROJ does not shadow PROJECT
    alternatives = "|".join(re.escape(p) for p in sorted(prefixes, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternatives})-\d+\b")


def extract_bug_ids(title: str, pattern: Pattern[str] = BUG_ID_PATTERN) -> List[str]:
    """All bug identifiers in title, in order of appearance."""
    return pattern.findall(title or "")


def extract_bug_id(title: str, pattern: Pattern[str] = BUG_ID_PATTERN) -> str | None:
    """Return the first bug identifier found in title, or None."""
    found = pattern.search(title or "")
    return found.group(0) if found else None


def matches(
    title: str,
    known_ids: AbstractSet[str],
    pattern: Pattern[str] | None = None,
) -> bool:
    """True if title has no bug identifier or any of its identifiers is in known_ids.

    Without an explicit pattern, the pattern is derived from known_ids.
    """
    if pattern is None:
        pattern = bug_id_pattern(known_ids=known_ids)
    bug_ids = extract_bug_ids(title, pattern)
    if not bug_ids:
        return True
    return any(bug_id in known_ids for bug_id in bug_ids)


class BugMatcher:
    """Allow-list and pattern bound together for filtering pages of pull requests."""

    def __init__(self, known_ids: Iterable[str], pattern: Pattern[str] | None = None) -> None:
        self.known_ids = frozenset(known_ids)
        self.pattern = pattern if pattern is not None else bug_id_pattern(known_ids=self.known_ids)

    def extract(self, title: str) -> str | None:
        return extract_bug_id(title, self.pattern)

    def matches(self, title: str) -> bool:
        return matches(title, self.known_ids, self.pattern)

    def filter(self, pulls: Iterable[PullRequestSummary]) -> List[PullRequestSummary]:
        """Matching pull requests, in input order."""
        return [pr for pr in pulls if self.matches(pr.title)]
