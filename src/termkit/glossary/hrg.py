"""Human-readable glossary (HRG) generation from an MRG."""

from __future__ import annotations

import logging
from typing import List

from .converter import RenderConverter
from .models import Terminology

logger = logging.getLogger(__name__)

MARKDOWN_TABLE_HEADER = "| Term | Description |\n| ---- | ----------- |"


def generate_hrg(terminology: Terminology, converter: RenderConverter) -> str:
    """
    Render every entry of a terminology, one line per entry, sorted by term.

    Args:
        terminology: Terminology to render
        converter: Converter producing one line per entry

    Returns:
        The glossary text (a Markdown table for the markdowntable converter)
    """
    lines: List[str] = []
    if converter.type == "markdowntable":
        lines.append(MARKDOWN_TABLE_HEADER)

    for entry in sorted(terminology.entries, key=lambda e: e.term.lower()):
        rendered = converter.convert(entry)
        if rendered == "":
            logger.warning("Entry '%s' rendered as an empty string, check the converter", entry.term)
            continue
        lines.append(rendered)

    logger.info("Generated HRG for '%s' (%d entries)", terminology.filename, len(terminology.entries))
    return "\n".join(lines) + "\n"
