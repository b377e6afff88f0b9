"""Terminology construction from a version's termselection.

The builder keeps a terminology under construction and applies each
termselection instruction strictly in order. Problems with one instruction
are logged and the instruction is skipped. Only the 'throw' not-exist policy
halts a build.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .curated import CuratedTextSource
from .exceptions import GlossaryError, RegistryNotFoundError
from .models import Entry, ScopeAdmin, ScopeRef, Terminology, TerminologyInfo, Version
from .policy import NotExistPolicy
from .registry import TerminologyRegistry, mrg_filename
from .selection import Instruction, InstructionKind, entry_matches, is_list_field, parse_instruction

logger = logging.getLogger(__name__)


def _plural(count: int) -> str:
    return f"{count} entr{'ies' if count != 1 else 'y'}"


@dataclass
class _UnderConstruction:
    entries: List[Entry] = field(default_factory=list)
    scopetags: List[Optional[str]] = field(default_factory=list)

    def upsert(self, entry: Entry) -> None:
        """Replace the entry with the same term (last write wins) or append."""
        for index, existing in enumerate(self.entries):
            if existing.term == entry.term:
                self.entries[index] = entry.copy()
                return
        self.entries.append(entry.copy())


class TerminologyBuilder:
    """Builds the terminology of one version of the current scope."""

    def __init__(
        self,
        admin: ScopeAdmin,
        registry: TerminologyRegistry,
        curated: Optional[CuratedTextSource] = None,
        policy: NotExistPolicy = NotExistPolicy.WARN,
    ):
        self.admin = admin
        self.registry = registry
        self.curated = curated or CuratedTextSource(admin.scope)
        self.policy = policy

    def build(self, version: Version) -> Terminology:
        """
        Apply the version's termselection and return the resulting terminology.

        Args:
            version: SAF version to build

        Returns:
            Terminology with entries sorted by term
        """
        state = _UnderConstruction()
        if not version.termselection:
            logger.warning("No 'termselection' items found for '%s'", version.vsntag)

        for raw in version.termselection:
            try:
                instruction = parse_instruction(raw)
            except GlossaryError as e:
                logger.error("E021 %s", e)
                continue

            try:
                if instruction.kind is InstructionKind.REMOVE:
                    self._remove(state, instruction)
                elif instruction.kind is InstructionKind.RENAME:
                    self._rename(state, instruction)
                else:
                    self._add(state, instruction)
            except RegistryNotFoundError as e:
                logger.info("Termselection '%s' skipped", instruction)
                self.policy.handle(e)
            except (GlossaryError, OSError) as e:
                logger.error("Termselection '%s' caused an error: %s", instruction, e)

        scope = self.admin.scope
        info = TerminologyInfo(
            scopetag=scope.scopetag,
            scopedir=scope.scopedir,
            curatedir=scope.curatedir,
            vsntag=version.vsntag,
            altvsntags=list(version.altvsntags),
        )
        entries = sorted(state.entries, key=lambda e: e.term.lower())
        return Terminology(info=info, scopes=self._resolve_scopes(state.scopetags), entries=entries)

    def _resolve_scopes(self, scopetags: List[Optional[str]]) -> List[ScopeRef]:
        """Deduplicate source scopetags and keep the ones the SAF administers."""
        resolved: Dict[str, ScopeRef] = {}
        for scopetag in scopetags:
            if not scopetag or scopetag in resolved:
                continue
            declared = self.admin.find_import(scopetag)
            if declared is None:
                logger.debug("Dropping scope '%s' from scopes: not in the SAF import list", scopetag)
                continue
            resolved[scopetag] = ScopeRef(scopetag=declared.scopetag, scopedir=declared.scopedir)
        return list(resolved.values())

    def _source_entries(self, instruction: Instruction) -> tuple[str, List[Entry]]:
        if not instruction.from_registry:
            return "curated texts", self.curated.entries()

        scopetag = instruction.scopetag or self.admin.scope.scopetag
        filename = mrg_filename(scopetag, instruction.vsntag)
        terminology = self.registry.load(scopetag, instruction.vsntag)
        return f"'{filename}'", terminology.entries

    def _add(self, state: _UnderConstruction, instruction: Instruction) -> None:
        source, candidates = self._source_entries(instruction)

        if instruction.selects_all:
            selected = list(candidates)
        else:
            selected = [e for e in candidates if entry_matches(e, instruction.key, instruction.values)]

        logger.info("Termselection (%s): '%s'", source, instruction)
        if not selected:
            logger.warning("Selection matched 0 entries")
            return

        for entry in selected:
            state.upsert(entry)
        state.scopetags.append(instruction.scopetag)
        logger.debug("Added %s: %s", _plural(len(selected)), ", ".join(e.term for e in selected))

        if instruction.values and not instruction.selects_all:
            unmatched = [
                v for v in instruction.values
                if not any(entry_matches(e, instruction.key, (v,)) for e in selected)
            ]
            if unmatched:
                logger.warning("Could not match: %s[%s]", instruction.key, ", ".join(unmatched))

    def _remove(self, state: _UnderConstruction, instruction: Instruction) -> None:
        kept: List[Entry] = []
        removed: List[Entry] = []
        for entry in state.entries:
            if not entry_matches(entry, instruction.key, instruction.values):
                kept.append(entry)
                continue
            removed.append(entry)
            # List-valued matches are reported but the entry stays
            if instruction.values and is_list_field(entry, instruction.key):
                kept.append(entry)
        state.entries = kept

        logger.info("Termselection (provisional): '%s'", instruction)
        if not removed:
            logger.warning("Selection matched 0 terms")
            return

        logger.debug("Removed %s: %s", _plural(len(removed)), ", ".join(e.term for e in removed))
        if instruction.values:
            unmatched = [
                v for v in instruction.values
                if not any(entry_matches(e, instruction.key, (v,)) for e in removed)
            ]
            if unmatched:
                logger.warning("Could not match: -%s[%s]", instruction.key, ", ".join(unmatched))

    def _rename(self, state: _UnderConstruction, instruction: Instruction) -> None:
        renamed = [e for e in state.entries if e.term == instruction.key]
        for entry in renamed:
            for key, value in instruction.modifiers.items():
                entry.set(key, value)

        logger.info("Termselection (provisional): '%s'", instruction)
        if not renamed:
            logger.warning("Selection matched 0 entries")
        else:
            logger.debug("Renamed %s: %s", _plural(len(renamed)), instruction.key)
