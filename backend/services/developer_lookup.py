"""
Developer resolution from project / master project names.

The DLD transactions table has no developer column. A developer is inferred
from the master project or project name:

    1. exact master project match in DEVELOPER_LOOKUP
    2. exact project match in DEVELOPER_LOOKUP
    3. ordered keyword rules over (master project or project), first match wins

No match is reported as unresolved. The lookup never substitutes a
placeholder; the presentation layer decides how to render it.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from constants import DEVELOPER_KEYWORD_RULES, DEVELOPER_LOOKUP, UNKNOWN_DEVELOPER_LABEL


class DeveloperMatch(enum.Enum):
    MASTER_PROJECT = "master_project"
    PROJECT = "project"
    KEYWORD = "keyword"
    UNRESOLVED = "unresolved"


class _Unresolved:
    """Sentinel returned by get_developer() when nothing matches."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNRESOLVED"

    def __bool__(self):
        return False


UNRESOLVED = _Unresolved()


@dataclass(frozen=True)
class DeveloperResolution:
    name: Optional[str]
    matched_by: DeveloperMatch
    matched_on: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.matched_by is not DeveloperMatch.UNRESOLVED

    def label(self, unresolved_label: str = UNKNOWN_DEVELOPER_LABEL) -> str:
        """Display label; unresolved renders as `unresolved_label`."""
        return self.name if self.is_resolved else unresolved_label

    def to_dict(self):
        return {
            'developer': self.name,
            'resolved': self.is_resolved,
            'matched_by': self.matched_by.value,
            'matched_on': self.matched_on,
        }


_NO_MATCH = DeveloperResolution(name=None, matched_by=DeveloperMatch.UNRESOLVED)


def _match_keywords(text: str) -> Optional[tuple]:
    haystack = text.lower()
    for keywords, developer in DEVELOPER_KEYWORD_RULES:
        for keyword in keywords:
            if keyword in haystack:
                return developer, keyword
    return None


def resolve_developer(
    master_project: Optional[str] = None,
    project_name: Optional[str] = None,
) -> DeveloperResolution:
    """Resolve a developer, reporting which rule matched."""
    if master_project and master_project in DEVELOPER_LOOKUP:
        return DeveloperResolution(
            DEVELOPER_LOOKUP[master_project], DeveloperMatch.MASTER_PROJECT, master_project
        )
    if project_name and project_name in DEVELOPER_LOOKUP:
        return DeveloperResolution(
            DEVELOPER_LOOKUP[project_name], DeveloperMatch.PROJECT, project_name
        )

    search_text = master_project or project_name or ''
    if search_text:
        hit = _match_keywords(search_text)
        if hit is not None:
            developer, keyword = hit
            return DeveloperResolution(developer, DeveloperMatch.KEYWORD, keyword)

    return _NO_MATCH


def get_developer(master_project: Optional[str] = None, project_name: Optional[str] = None):
    """Developer name, or the UNRESOLVED sentinel."""
    resolution = resolve_developer(master_project, project_name)
    return resolution.name if resolution.is_resolved else UNRESOLVED
