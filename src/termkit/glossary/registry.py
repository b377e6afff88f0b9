"""Terminology registry: loading, caching and publishing of MRG files.

An MRG (machine-readable glossary) is a YAML document with a `terminology`
metadata section, an optional `scopes` list and an `entries` list. MRGs live
in a scope's glossary directory as `mrg.<scopetag>.<vsntag>.yaml`, with
byte-identical alias copies for the default version and alternative version
tags.
"""

from __future__ import annotations

import logging
import threading
from io import StringIO
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .exceptions import FetchError, RegistryNotFoundError, TerminologyLoadError
from .fetch import DocumentFetcher, join_location
from .models import REQUIRED_TERMINOLOGY_FIELDS, Entry, ScopeAdmin, Terminology

logger = logging.getLogger(__name__)


def mrg_filename(scopetag: str, vsntag: Optional[str] = None) -> str:
    """Filename convention for an MRG; no vsntag means the default alias.

    Examples:
        >>> mrg_filename("tev2", "v1")
        'mrg.tev2.v1.yaml'
        >>> mrg_filename("tev2")
        'mrg.tev2.yaml'
    """
    if vsntag:
        return f"mrg.{scopetag}.{vsntag}.yaml"
    return f"mrg.{scopetag}.yaml"


def parse_terminology(text: str, location: str) -> Terminology:
    """
    Parse and validate MRG YAML.

    Args:
        text: Raw YAML content
        location: Where the MRG came from (for error messages)

    Returns:
        The parsed Terminology

    Raises:
        TerminologyLoadError: If the YAML is invalid or required fields are missing
    """
    yaml = YAML(typ="safe")
    try:
        data = yaml.load(text)
    except YAMLError as e:
        raise TerminologyLoadError(location, f"YAML parsing error: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("terminology"), dict):
        raise TerminologyLoadError(location, "missing 'terminology' section")

    missing = [key for key in REQUIRED_TERMINOLOGY_FIELDS if not data["terminology"].get(key)]
    if missing:
        raise TerminologyLoadError(location, f"missing required property '{', '.join(missing)}'")

    entries = data.get("entries") or []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise TerminologyLoadError(location, "'entries' must be a list of mappings")

    try:
        return Terminology.from_dict(data)
    except ValueError as e:
        raise TerminologyLoadError(location, str(e)) from e


def dump_terminology(terminology: Terminology) -> str:
    """Serialize a terminology to MRG YAML."""
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.width = 4096  # Prevent line wrapping
    buffer = StringIO()
    yaml.dump(terminology.to_dict(), buffer)
    return buffer.getvalue()


def publish_terminology(
    directory: Path,
    scopetag: str,
    vsntag: str,
    altvsntags: Iterable[str],
    is_default: bool,
    payload: str,
) -> List[Path]:
    """
    Write an MRG and its alias copies.

    Args:
        directory: Glossary directory to write into (created if missing)
        scopetag: Scopetag used in the filenames
        vsntag: Version tag of the canonical file
        altvsntags: Alternative version tags, one alias file each
        is_default: Also write the unsuffixed `mrg.<scopetag>.yaml` alias
        payload: Serialized MRG, written identically to every file

    Returns:
        Paths of every file written, canonical file first

    Raises:
        OSError: If a file cannot be written
    """
    directory.mkdir(parents=True, exist_ok=True)

    filenames = [mrg_filename(scopetag, vsntag)]
    if is_default:
        filenames.append(mrg_filename(scopetag))
    for alt in altvsntags:
        name = mrg_filename(scopetag, alt)
        if name not in filenames:
            filenames.append(name)

    written: List[Path] = []
    for name in filenames:
        path = directory / name
        path.write_text(payload, encoding="utf-8")
        logger.info("Wrote %s", path)
        written.append(path)
    return written


class TerminologyRegistry:
    """Cache of terminologies keyed by MRG filename.

    One registry is shared by every component of a run; repeated loads of the
    same (scopetag, vsntag) return the same Terminology instance.
    """

    def __init__(self, glossary_location: str, fetcher: DocumentFetcher):
        self.glossary_location = str(glossary_location)
        self.fetcher = fetcher
        self._cache: Dict[str, Terminology] = {}
        self._lock = threading.Lock()
        self._key_locks: Dict[str, threading.Lock] = {}

    @classmethod
    def for_scope(cls, admin: ScopeAdmin, fetcher: DocumentFetcher) -> "TerminologyRegistry":
        """Registry reading from the glossary directory of a scope."""
        location = join_location(admin.scope.localscopedir or admin.scope.scopedir, admin.scope.glossarydir)
        return cls(location, fetcher)

    def load(self, scopetag: str, vsntag: Optional[str] = None) -> Terminology:
        """
        Load (or return the cached) terminology for a scope version.

        Args:
            scopetag: Scope of the MRG
            vsntag: Version tag; None loads the default alias

        Raises:
            RegistryNotFoundError: If the MRG file does not exist
            TerminologyLoadError: If the MRG is unparseable or incomplete
        """
        filename = mrg_filename(scopetag, vsntag)
        cached = self._cache.get(filename)
        if cached is not None:
            return cached

        # First load per filename is serialized; different filenames do not wait on each other
        with self._key_lock(filename):
            cached = self._cache.get(filename)
            if cached is not None:
                return cached

            location = join_location(self.glossary_location, filename)
            terminology = self._read(location)
            with self._lock:
                self._cache[filename] = terminology
            logger.debug("Loaded %s (%d entries)", location, len(terminology.entries))
            return terminology

    def _key_lock(self, filename: str) -> threading.Lock:
        with self._lock:
            return self._key_locks.setdefault(filename, threading.Lock())

    def load_file(self, location: str) -> Terminology:
        """Load an MRG from an explicit path or URL, bypassing the cache."""
        return self._read(str(location))

    def _read(self, location: str) -> Terminology:
        try:
            text = self.fetcher.read_text(location)
        except FetchError as e:
            raise RegistryNotFoundError(location, e.reason) from e
        return parse_terminology(text, location)

    def put(self, terminology: Terminology, filename: Optional[str] = None) -> None:
        """Register a terminology under its filename (or an alias filename)."""
        with self._lock:
            self._cache[filename or terminology.filename] = terminology

    def cached(self, scopetag: str, vsntag: Optional[str] = None) -> Optional[Terminology]:
        return self._cache.get(mrg_filename(scopetag, vsntag))

    @staticmethod
    def lookup(terminology: Terminology, term: str) -> List[Entry]:
        """Entries whose term equals the key or whose altterms contain it."""
        return [
            entry
            for entry in terminology.entries
            if entry.term == term or term in (entry.altterms or [])
        ]

    def __contains__(self, filename: Any) -> bool:
        return filename in self._cache
