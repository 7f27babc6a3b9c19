"""Lookup of labelled sections inside a PUG View record tree.

Section order differs between compounds and schema versions, so sections
are only ever found by exact heading. The one positional lookup the
extractor needs goes through ``section_at``, which never raises.
"""

from typing import Optional, Sequence

from logger import LogManager
from models import Information, Section

logger = LogManager().get_logger("section_locator")


def find_section_index(sections: Sequence[Section], heading: str) -> Optional[int]:
    """
    Find the position of the first section with the given heading.

    Args:
        sections: Sibling sections, in document order
        heading: Exact TOCHeading to match

    Returns:
        Index of the first match, or None if there is none
    """
    for index, section in enumerate(sections):
        if section.heading == heading:
            return index
    logger.debug(f"No section headed '{heading}' among {len(sections)} siblings")
    return None


def find_section(sections: Sequence[Section], heading: str) -> Optional[Section]:
    """Find the first section with the given heading."""
    index = find_section_index(sections, heading)
    if index is None:
        return None
    return sections[index]


def section_at(sections: Sequence[Section], index: int) -> Optional[Section]:
    """Bounds-checked positional access; None outside the list."""
    if 0 <= index < len(sections):
        return sections[index]
    return None


def first_information(section: Optional[Section]) -> Optional[Information]:
    """First information entry of a section, if any."""
    if section is None or not section.information:
        return None
    return section.information[0]
