"""Termselection instructions.

A version's `termselection` is an ordered list of instructions that build up
its terminology:

- add/select: `key[v1, v2]@scopetag:vsntag` (`@` absent: curated texts of
  the current scope; `@` without scopetag: the current scope's own MRG;
  `:vsntag` absent: the default MRG). `*` as key selects all entries.
- remove: `-key[v1, v2]`
- rename: `rename <term> [field: value, field2: "quoted, value"]`
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Dict, Optional, Tuple

from .exceptions import InstructionError
from .models import Entry

ALL_ENTRIES = "*"

_ADD = re.compile(
    r"^(?P<key>[^\[\]@\s]+)\s*"
    r"(?:\[(?P<values>.*?)\])?\s*"
    r"(?:(?P<identifier>@)\s*(?P<scopetag>[a-z0-9_-]+)?(?::(?P<vsntag>\S+))?)?$"
)
_REMOVE = re.compile(r"^-\s*(?P<key>[^\[\]@\s]+)\s*(?:\[(?P<values>.*?)\])?$")
_RENAME = re.compile(r"^rename\s+(?P<term>[^\[]+?)\s*(?:\[(?P<modifiers>.*)\])?$")
_MODIFIER = re.compile(r"[\s,]*([^:]+?)\s*:\s*(?:([\"'`])(.*?)\2|([^,]+))\s*")


class InstructionKind(StrEnum):
    """What a termselection instruction does."""

    ADD = "add"
    REMOVE = "remove"
    RENAME = "rename"


@dataclass(frozen=True)
class Instruction:
    """A parsed termselection instruction."""

    kind: InstructionKind
    key: str  # field name, or the term for renames
    values: Optional[Tuple[str, ...]] = None
    from_registry: bool = False  # `@` present: select from an MRG instead of curated texts
    scopetag: Optional[str] = None
    vsntag: Optional[str] = None
    modifiers: Dict[str, str] = field(default_factory=dict)

    @property
    def selects_all(self) -> bool:
        return self.key == ALL_ENTRIES

    def __str__(self) -> str:
        if self.kind is InstructionKind.RENAME:
            mods = ", ".join(f"{k}: {v}" for k, v in self.modifiers.items())
            return f"rename {self.key} [{mods}]"
        values = f"[{', '.join(self.values)}]" if self.values else ""
        if self.kind is InstructionKind.REMOVE:
            return f"-{self.key}{values or '[]'}"
        text = f"{self.key}{values}"
        if self.from_registry:
            text += f"@{self.scopetag or ''}"
            if self.vsntag:
                text += f":{self.vsntag}"
        return text


def _split_values(raw: Optional[str]) -> Optional[Tuple[str, ...]]:
    if raw is None or raw.strip() == "":
        return None
    return tuple(v.strip() for v in raw.split(","))


def parse_modifiers(raw: str) -> Dict[str, str]:
    """Parse `field: value, field2: "quoted, value"` into a mapping.

    Examples:
        >>> parse_modifiers('formPhrases: "act, acts", status: draft')
        {'formPhrases': 'act, acts', 'status': 'draft'}
    """
    modifiers: Dict[str, str] = {}
    for match in _MODIFIER.finditer(raw):
        key = match.group(1).strip()
        if match.group(2) is not None:
            value = match.group(3)
        else:
            value = match.group(4).strip()
        modifiers[key] = value
    return modifiers


def parse_instruction(text: str) -> Instruction:
    """
    Parse one termselection instruction.

    Args:
        text: Instruction as written in the SAF

    Returns:
        The parsed Instruction

    Raises:
        InstructionError: If the instruction does not follow any known syntax
    """
    instruction = str(text).strip()
    if not instruction:
        raise InstructionError(str(text), "empty instruction")

    if instruction.startswith("-"):
        match = _REMOVE.match(instruction)
        if match is None:
            raise InstructionError(instruction)
        return Instruction(
            kind=InstructionKind.REMOVE,
            key=match.group("key"),
            values=_split_values(match.group("values")),
        )

    if instruction.startswith("rename "):
        match = _RENAME.match(instruction)
        if match is None:
            raise InstructionError(instruction)
        modifiers = parse_modifiers(match.group("modifiers") or "")
        return Instruction(kind=InstructionKind.RENAME, key=match.group("term").strip(), modifiers=modifiers)

    match = _ADD.match(instruction)
    if match is None:
        raise InstructionError(instruction)
    return Instruction(
        kind=InstructionKind.ADD,
        key=match.group("key"),
        values=_split_values(match.group("values")),
        from_registry=match.group("identifier") is not None,
        scopetag=match.group("scopetag"),
        vsntag=match.group("vsntag"),
    )


def entry_matches(entry: Entry, key: str, values: Optional[Tuple[str, ...]]) -> bool:
    """
    Selection rule shared by add and remove instructions.

    Without values the field must exist and be empty (or null). With values, a
    string field must equal one of them, or a list field must contain one.

    Args:
        entry: Entry to test
        key: Field name
        values: Requested values, or None

    Returns:
        True if the entry is selected
    """
    if not entry.has(key):
        return False

    value: Any = entry.get(key)
    if not values:
        return value is None or value == ""
    if isinstance(value, (list, tuple)):
        return any(v in value for v in values)
    if value is None:
        return False
    return str(value) in values


def is_list_field(entry: Entry, key: str) -> bool:
    return isinstance(entry.get(key), (list, tuple))
