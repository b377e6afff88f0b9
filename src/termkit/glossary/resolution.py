"""Term reference resolution.

The resolver reads every document matching a glob pattern, resolves each
term reference against the terminology of the referenced scope version,
and writes documents with at least one converted reference to the output
directory.
"""

from __future__ import annotations

import glob
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List

from .conflict import MatchKind, classify_matches, distinct_sources, find_matching_entries
from .converter import RenderConverter
from .editing import TextEdit, apply_edits
from .exceptions import InterpreterError, RegistryNotFoundError
from .frontmatter import frontmatter_end
from .interpreter import PatternInterpreter
from .models import ScopeAdmin, TermReference
from .policy import NotExistPolicy
from .registry import TerminologyRegistry
from .report import RunReport
from .similarity import suggest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedText:
    """Result of resolving one document."""
    text: str
    converted: int


def line_of(text: str, offset: int) -> int:
    """1-based line number of an offset."""
    return text.count("\n", 0, offset) + 1


def mirror_path(output_dir: Path, source: Path) -> Path:
    """Path of a source file mirrored under the output directory."""
    if source.is_absolute():
        try:
            source = source.relative_to(Path.cwd())
        except ValueError:
            source = Path(*source.parts[1:])
    return output_dir / source


class Resolver:
    """Resolves term references in documents of the current scope."""

    def __init__(
        self,
        admin: ScopeAdmin,
        interpreter: PatternInterpreter,
        converter: RenderConverter,
        registry: TerminologyRegistry,
        report: RunReport,
        output_dir: Path,
        force: bool = False,
        policy: NotExistPolicy = NotExistPolicy.WARN,
    ):
        self.admin = admin
        self.interpreter = interpreter
        self.converter = converter
        self.registry = registry
        self.report = report
        self.output_dir = Path(output_dir)
        self.force = force
        self.policy = policy

    def resolve(self, pattern: str) -> bool:
        """
        Resolve all files matching a glob pattern.

        Per-file problems are recorded in the report and the file is skipped.

        Args:
            pattern: Glob pattern (`**` matches recursively)

        Returns:
            True once every file has been processed

        Raises:
            TerminologyLoadError: If a referenced MRG exists but cannot be loaded
            NotExistAbort: If the policy is 'throw' and an MRG is missing
        """
        logger.info("Reading files using pattern string '%s'", pattern)
        files = sorted(p for p in glob.glob(pattern, recursive=True) if Path(p).is_file())
        logger.info("Found %d files", len(files))

        for name in files:
            path = Path(name)
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                self.report.error(f"E009 Could not read file '{path}': {e}")
                continue

            try:
                resolved = self.resolve_text(text, str(path))
            except (InterpreterError, ValueError) as e:
                self.report.error(f"E010 Could not interpret and convert file '{path}': {e}")
                continue

            if resolved.converted > 0:
                self.write_file(mirror_path(self.output_dir, path), resolved.text)
        return True

    def resolve_text(self, text: str, path: str) -> ResolvedText:
        """
        Resolve every term reference in a document body.

        Args:
            text: Full document content
            path: Document path used in diagnostics

        Returns:
            ResolvedText with the new content and the number of conversions
        """
        body_start = frontmatter_end(text)
        edits: List[TextEdit] = []

        for match in self.interpreter.scan(text):
            if match.start() < body_start:
                continue
            replacement = self._resolve_match(match, text, path)
            if replacement:
                edits.append(TextEdit(match.start(), match.end(), replacement))

        if not edits:
            return ResolvedText(text=text, converted=0)
        return ResolvedText(text=apply_edits(text, edits), converted=len(edits))

    def _apply_defaults(self, reference: TermReference) -> None:
        scope = self.admin.scope
        if not reference.scopetag:
            reference.scopetag = scope.scopetag
        if reference.scopetag == scope.scopetag and not reference.vsntag:
            reference.vsntag = scope.defaultvsn

    def _resolve_match(self, match: re.Match[str], text: str, path: str) -> str:
        """Replacement text for one match, or "" when it cannot be converted."""
        reference = self.interpreter.decode(match)
        self._apply_defaults(reference)
        line = line_of(text, match.start())
        raw = match.group(0)

        try:
            terminology = self.registry.load(reference.scopetag or "", reference.vsntag)
        except RegistryNotFoundError as e:
            self.policy.handle(e)
            self.report.term_help(path, line, f"Term ref '{raw}' > '{reference.label()}', {e}")
            return ""

        if not reference.vsntag:
            reference.vsntag = terminology.info.vsntag

        matches = find_matching_entries(terminology, reference)
        kind = classify_matches(matches)
        label = reference.label()

        if kind is MatchKind.AMBIGUOUS:
            sources = distinct_sources(matches, default=terminology.filename)
            self.report.term_help(
                path, line,
                f"Term ref '{raw}' > '{label}', has multiple matching MRG entries in '{', '.join(sources)}'",
            )
            return ""

        if kind is MatchKind.UNKNOWN:
            message = f"Term ref '{raw}' > '{label}', could not be matched with an MRG entry"
            suggestion = suggest(reference, terminology)
            if suggestion is not None:
                message = f"{message}, did you mean '{suggestion}'?"
            self.report.term_help(path, line, message)
            return ""

        entry = matches[0]
        replacement = self.converter.convert(entry, reference)
        if replacement == "":
            self.report.term_help(
                path, line,
                f"Term ref '{raw}' > '{reference.label(entry.term)}', resulted in an empty string, check the converter",
            )
            return ""

        self.report.term_converted(entry.term)
        return replacement

    def write_file(self, path: Path, data: str) -> bool:
        """Write a resolved document, refusing to overwrite without force."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.report.error(f"E007 Error creating directory '{path.parent}': {e}")
            return False

        if path.exists() and not self.force:
            self.report.error(f"E013 File '{path}' already exists. Use --force to overwrite")
            return False

        try:
            path.write_text(data, encoding="utf-8")
        except OSError as e:
            self.report.error(f"E008 Error writing file '{path}': {e}")
            return False

        self.report.file_written(str(path))
        logger.debug("Wrote %s", path)
        return True
