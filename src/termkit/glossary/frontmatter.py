"""Front-matter handling for Markdown documents.

A document is treated as two zones: an optional YAML front-matter block
delimited by `---` lines at the very top, and the body. Nothing in the body
is parsed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError


@dataclass
class FrontMatter:
    """Result of splitting a document into front matter and body."""
    data: Dict[str, Any] = field(default_factory=dict)
    body: str = ""
    end: int = 0  # offset of the first body character; 0 when there is no front matter


def frontmatter_end(text: str) -> int:
    """Return the offset just past the closing `---` line, or 0 if none.

    Examples:
        >>> frontmatter_end("---\\nterm: x\\n---\\nbody")
        16
        >>> frontmatter_end("no front matter")
        0
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip("\r\n") != "---":
        return 0

    offset = len(lines[0])
    for line in lines[1:]:
        offset += len(line)
        if line.rstrip("\r\n").strip() == "---":
            return offset
    return 0


def split_frontmatter(text: str) -> FrontMatter:
    """Split a document and parse its front matter.

    Args:
        text: Full document content

    Returns:
        FrontMatter with parsed data (empty when absent) and the body text

    Raises:
        ValueError: If the front matter is not valid YAML or not a mapping
    """
    end = frontmatter_end(text)
    if end == 0:
        return FrontMatter(data={}, body=text, end=0)

    header = text[:end].splitlines()[1:-1]
    yaml = YAML(typ="safe")
    try:
        data = yaml.load("\n".join(header))
    except YAMLError as e:
        raise ValueError(f"invalid front matter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("front matter is not a mapping")
    return FrontMatter(data=dict(data), body=text[end:], end=end)
