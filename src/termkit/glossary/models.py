"""Core data models for scopes, versions, glossary entries and terminologies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

# Open entry fields hold a string, a list of strings, or nothing. Other YAML
# values found in persisted MRGs are carried through untouched.
FieldValue = Union[str, List[str], None]

REQUIRED_SCOPE_FIELDS = ("scopetag", "scopedir", "curatedir")
REQUIRED_TERMINOLOGY_FIELDS = ("scopetag", "scopedir", "curatedir", "vsntag")


def _as_list(value: Any) -> List[str]:
    """Normalize a scalar-or-list YAML value into a list of strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


@dataclass(slots=True)
class ScopeRef:
    """Reference to another scope (SAF import list, MRG scopes section)."""
    scopetag: str
    scopedir: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"scopetag": self.scopetag, "scopedir": self.scopedir}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScopeRef":
        return cls(scopetag=str(data.get("scopetag", "")), scopedir=str(data.get("scopedir") or ""))


@dataclass(slots=True)
class Scope:
    """The `scope` section of a scope administration file."""
    scopetag: str
    scopedir: str
    curatedir: str
    glossarydir: str = "glossaries"
    website: str = ""
    navpath: str = "/"
    defaultvsn: Optional[str] = None
    bodyfileid: Optional[str] = None
    localscopedir: str = ""  # where the SAF was actually read from


@dataclass(slots=True)
class Version:
    """One published (or to-be-built) version of a scope's terminology."""
    vsntag: str
    altvsntags: List[str] = field(default_factory=list)
    termselection: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Version":
        return cls(
            vsntag=str(data.get("vsntag", "")),
            altvsntags=_as_list(data.get("altvsntags")),
            termselection=[str(i) for i in (data.get("termselection") or [])],
        )


@dataclass
class ScopeAdmin:
    """Parsed scope administration file (SAF)."""
    scope: Scope
    scopes: List[ScopeRef] = field(default_factory=list)
    versions: List[Version] = field(default_factory=list)

    def find_import(self, scopetag: Optional[str]) -> Optional[ScopeRef]:
        """Return the import-list entry for a scopetag, if administered."""
        for ref in self.scopes:
            if ref.scopetag == scopetag:
                return ref
        return None

    def find_version(self, vsntag: str) -> Optional[Version]:
        for version in self.versions:
            if version.vsntag == vsntag or vsntag in version.altvsntags:
                return version
        return None


@dataclass
class Entry:
    """A single glossary entry.

    `term`, `altterms` and `scopetag` are typed; every other field lives in
    `fields` and is reached through `get`/`set`, so selection logic can treat
    all fields alike.
    """
    term: str
    altterms: Optional[List[str]] = None
    scopetag: Optional[str] = None
    fields: Dict[str, Any] = field(default_factory=dict)

    def has(self, key: str) -> bool:
        """True if the field is present (a null value still counts)."""
        if key == "term":
            return True
        if key == "altterms":
            return self.altterms is not None
        if key == "scopetag":
            return self.scopetag is not None
        return key in self.fields

    def get(self, key: str, default: Any = None) -> Any:
        if key == "term":
            return self.term
        if key == "altterms":
            return self.altterms if self.altterms is not None else default
        if key == "scopetag":
            return self.scopetag if self.scopetag is not None else default
        return self.fields.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key == "term":
            self.term = str(value)
        elif key == "altterms":
            self.altterms = None if value is None else _as_list(value)
        elif key == "scopetag":
            self.scopetag = None if value is None else str(value)
        else:
            self.fields[key] = value

    def copy(self) -> "Entry":
        """Shallow copy, so edits on the copy never reach the source terminology."""
        return Entry(
            term=self.term,
            altterms=list(self.altterms) if self.altterms is not None else None,
            scopetag=self.scopetag,
            fields=dict(self.fields),
        )

    @property
    def glossary_text(self) -> Optional[str]:
        return self.fields.get("glossaryText")

    @property
    def synonym_of(self) -> Optional[str]:
        return self.fields.get("synonymOf")

    @property
    def source(self) -> Optional[str]:
        """Where the entry came from: curated-text locator or explicit source."""
        return self.fields.get("locator") or self.fields.get("source")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"term": self.term}
        if self.altterms is not None:
            data["altterms"] = list(self.altterms)
        if self.scopetag is not None:
            data["scopetag"] = self.scopetag
        data.update(self.fields)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Entry":
        """Build an entry from a mapping that has at least a `term` key.

        Raises:
            ValueError: If `term` is missing or empty
        """
        term = data.get("term")
        if term is None or str(term) == "":
            raise ValueError("Entry must have a 'term' field")
        fields = {k: v for k, v in data.items() if k not in ("term", "altterms", "scopetag")}
        altterms = data.get("altterms")
        scopetag = data.get("scopetag")
        return cls(
            term=str(term),
            altterms=_as_list(altterms) if "altterms" in data and altterms is not None else None,
            scopetag=str(scopetag) if scopetag is not None else None,
            fields=fields,
        )


@dataclass
class TerminologyInfo:
    """The `terminology` section of an MRG."""
    scopetag: str
    scopedir: str
    curatedir: str
    vsntag: str
    altvsntags: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "scopetag": self.scopetag,
            "scopedir": self.scopedir,
            "curatedir": self.curatedir,
            "vsntag": self.vsntag,
            "altvsntags": list(self.altvsntags),
        }
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TerminologyInfo":
        extra = {k: v for k, v in data.items() if k not in REQUIRED_TERMINOLOGY_FIELDS + ("altvsntags",)}
        return cls(
            scopetag=str(data["scopetag"]),
            scopedir=str(data["scopedir"]),
            curatedir=str(data["curatedir"]),
            vsntag=str(data["vsntag"]),
            altvsntags=_as_list(data.get("altvsntags")),
            extra=extra,
        )


@dataclass
class Terminology:
    """Entry set plus metadata for one scope and version (an MRG)."""
    info: TerminologyInfo
    scopes: List[ScopeRef] = field(default_factory=list)
    entries: List[Entry] = field(default_factory=list)

    @property
    def filename(self) -> str:
        return f"mrg.{self.info.scopetag}.{self.info.vsntag}.yaml"

    def to_dict(self) -> dict[str, Any]:
        return {
            "terminology": self.info.to_dict(),
            "scopes": [s.to_dict() for s in self.scopes],
            "entries": [e.to_dict() for e in self.entries],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Terminology":
        return cls(
            info=TerminologyInfo.from_dict(data["terminology"]),
            scopes=[ScopeRef.from_dict(s) for s in (data.get("scopes") or []) if isinstance(s, dict)],
            entries=[Entry.from_dict(e) for e in (data.get("entries") or [])],
        )


@dataclass(slots=True)
class TermReference:
    """A decoded term reference found in a document."""
    showtext: str
    id: str
    trait: Optional[str] = None
    scopetag: Optional[str] = None
    vsntag: Optional[str] = None

    def properties(self) -> dict[str, Optional[str]]:
        return {
            "showtext": self.showtext,
            "id": self.id,
            "trait": self.trait,
            "scopetag": self.scopetag,
            "vsntag": self.vsntag,
        }

    def label(self, term: Optional[str] = None) -> str:
        """Render as `term@scopetag:vsntag` for diagnostics."""
        return f"{term or self.id}@{self.scopetag or ''}:{self.vsntag or ''}"
