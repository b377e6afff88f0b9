"""Curated-text ingestion.

Every Markdown file under a scope's curated-text directory describes one
term: its front matter becomes the entry's fields, and the scope adds a few
computed fields (scopetag, locator, navurl, headingids).
"""

from __future__ import annotations

import logging
import posixpath
import re
from pathlib import Path, PurePosixPath
from typing import List, Optional
from urllib.parse import urlsplit, urlunsplit

from .frontmatter import split_frontmatter
from .models import Entry, Scope

logger = logging.getLogger(__name__)

# Computed by the scope; never taken from a curated text's front matter
RESERVED_KEYS = frozenset({"scopetag", "locator", "navurl", "headingids"})

_HEADING = re.compile(r"^#+\s+(.*)$", re.MULTILINE)
_WHITESPACE = re.compile(r"\s+")


def extract_heading_ids(body: str) -> List[str]:
    """Heading ids of every Markdown heading line.

    Examples:
        >>> extract_heading_ids("# Summary\\ntext\\n## Further Notes")
        ['summary', 'further-notes']
    """
    return [_WHITESPACE.sub("-", m.group(1).strip()).lower() for m in _HEADING.finditer(body)]


def _join_url_path(*parts: str) -> str:
    """Join URL path segments, collapsing duplicate and trailing separators."""
    segments = [p.strip("/") for p in parts if p and p.strip("/")]
    joined = posixpath.normpath("/" + "/".join(segments)) if segments else "/"
    return "/" if joined == "." else joined


def build_navurl(website: str, *parts: str) -> str:
    """Append path segments to the path of the scope's website URL.

    Examples:
        >>> build_navurl("https://example.org/docs/", "/terms", "", "actor")
        'https://example.org/docs/terms/actor'
    """
    split = urlsplit(website or "")
    path = _join_url_path(split.path, *parts)
    return urlunsplit((split.scheme, split.netloc, path, "", ""))


class CuratedTextSource:
    """Lazily reads the curated texts of one scope, once per instance."""

    def __init__(self, scope: Scope):
        self.scope = scope
        self._entries: Optional[List[Entry]] = None
        self._synonyms: List[Entry] = []

    @property
    def directory(self) -> Path:
        return Path(self.scope.localscopedir or self.scope.scopedir) / self.scope.curatedir

    @property
    def synonyms(self) -> List[Entry]:
        """Entries that declare `synonymOf`."""
        self.entries()
        return list(self._synonyms)

    def entries(self) -> List[Entry]:
        """
        Entries for every curated text, in path order.

        Raises:
            FileNotFoundError: If the curated-text directory does not exist
        """
        if self._entries is not None:
            return self._entries

        curatedir = self.directory
        if not curatedir.is_dir():
            raise FileNotFoundError(f"Curated text directory '{curatedir}' does not exist")

        entries: List[Entry] = []
        for path in sorted(curatedir.rglob("*.md")):
            entry = self._read_ctext(path, curatedir)
            if entry is None:
                continue
            if entry.synonym_of:
                self._synonyms.append(entry)
            entries.append(entry)

        logger.debug("Read %d curated texts from %s", len(entries), curatedir)
        self._entries = entries
        return entries

    def _read_ctext(self, path: Path, curatedir: Path) -> Optional[Entry]:
        locator = path.relative_to(curatedir).as_posix()
        try:
            document = split_frontmatter(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.error("Could not read curated text '%s': %s", locator, e)
            return None

        data = {k: v for k, v in document.data.items() if str(k).lower() not in RESERVED_KEYS}
        if not data.get("term"):
            logger.warning("Skipping curated text '%s': no 'term' field", locator)
            return None

        body = document.body
        body_file = data.get("bodyFile")
        if body_file:
            body, navurl = self._resolve_body_file(str(body_file), body)
        else:
            relative = PurePosixPath(locator)
            navurl = build_navurl(self.scope.website, self.scope.navpath, str(relative.parent), relative.stem)

        data["scopetag"] = self.scope.scopetag
        data["locator"] = locator
        data["navurl"] = navurl
        data["headingids"] = extract_heading_ids(body)
        return Entry.from_dict(data)

    def _resolve_body_file(self, body_file: str, fallback_body: str) -> tuple[str, str]:
        """Body text and navurl for a curated text whose body lives elsewhere."""
        relative = PurePosixPath(body_file)
        navurl = build_navurl(self.scope.website, str(relative.parent), relative.stem)

        location = Path(self.scope.localscopedir or self.scope.scopedir) / body_file
        try:
            document = split_frontmatter(location.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError) as e:
            logger.error("An error occurred while attempting to load the bodyFile '%s': %s", body_file, e)
            return fallback_body, navurl

        file_id = self.scope.bodyfileid
        if file_id and document.data.get(file_id):
            stem = PurePosixPath(str(document.data[file_id])).stem
            navurl = build_navurl(self.scope.website, str(relative.parent), stem)
        return document.body, navurl
