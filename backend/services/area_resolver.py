"""
Area name resolution - marketing names and URL slugs to DLD area names.

DLD registers some well-known communities under a different name (Emaar
Beachfront is "Dubai Harbour") or with its own spelling ("Jumeriah Beach
Residence  - JBR"). AREA_ALIASES covers the known cases; everything else
falls back to a title-cased rendering of the input.

The fallback is a guess. It can yield zero results against an exact
canonical-name match downstream, which is why the query engine matches
area names by substring.

Usage:
    from services.area_resolver import resolve_area_name

    resolve_area_name("jvc")                    # "Jumeirah Village Circle"
    resolve_area_name("random-unknown-area")    # "Random Unknown Area"
"""

import re
from typing import Optional

from constants import AREA_ALIASES

_SEPARATORS = re.compile(r'[\s\-]+')
_WORD_START = re.compile(r'\b\w')


def normalize_area_key(value: str) -> str:
    """Lowercase, with runs of dashes/whitespace collapsed to one space."""
    return _SEPARATORS.sub(' ', value.strip().lower()).strip()


def _title_case(value: str) -> str:
    # Only first letters change: "DAMAC-hills" -> "DAMAC Hills", not "Damac Hills"
    spaced = _SEPARATORS.sub(' ', value.strip())
    return _WORD_START.sub(lambda m: m.group(0).upper(), spaced)


def lookup_area_alias(value: Optional[str]) -> Optional[str]:
    """Canonical name for a known alias, or None."""
    if not value:
        return None
    return AREA_ALIASES.get(normalize_area_key(value))


def resolve_area_name(value: str) -> str:
    """
    Resolve a user-facing area name or slug to the canonical DLD area name.

    Never raises; unknown input comes back title-cased.
    """
    if value is None:
        return ""
    canonical = lookup_area_alias(value)
    if canonical is not None:
        return canonical
    return _title_case(value)


def get_area_display_name(slug: str) -> str:
    """Marketing display name for a slug; never substitutes the DLD name."""
    if not slug:
        return ""
    return _title_case(slug)


def is_known_alias(value: Optional[str]) -> bool:
    return lookup_area_alias(value) is not None
