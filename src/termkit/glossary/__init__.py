"""Term reference resolution against versioned machine-readable glossaries."""

from .models import (
    Entry,
    Scope,
    ScopeAdmin,
    ScopeRef,
    Terminology,
    TerminologyInfo,
    TermReference,
    Version,
)
from .exceptions import (
    GlossaryError,
    ConfigError,
    FetchError,
    ScopeAdminError,
    InterpreterError,
    InstructionError,
    RegistryNotFoundError,
    TerminologyLoadError,
    NotExistAbort,
)
from .policy import NotExistPolicy, resolve_policy
from .fetch import DocumentFetcher
from .scope import load_scope_admin
from .interpreter import PatternInterpreter, slugify
from .registry import (
    TerminologyRegistry,
    dump_terminology,
    mrg_filename,
    publish_terminology,
)
from .curated import CuratedTextSource
from .selection import parse_instruction, entry_matches
from .builder import TerminologyBuilder
from .importer import ImportCoordinator, ImportResult
from .converter import RenderConverter
from .similarity import SUGGESTION_THRESHOLD, suggest
from .editing import TextEdit, apply_edits
from .conflict import MatchKind, classify_matches
from .report import RunReport
from .rendering import render_report
from .resolution import Resolver, ResolvedText
from .hrg import generate_hrg

__all__ = [
    "Entry",
    "Scope",
    "ScopeAdmin",
    "ScopeRef",
    "Terminology",
    "TerminologyInfo",
    "TermReference",
    "Version",
    "GlossaryError",
    "ConfigError",
    "FetchError",
    "ScopeAdminError",
    "InterpreterError",
    "InstructionError",
    "RegistryNotFoundError",
    "TerminologyLoadError",
    "NotExistAbort",
    "NotExistPolicy",
    "resolve_policy",
    "DocumentFetcher",
    "load_scope_admin",
    "PatternInterpreter",
    "slugify",
    "TerminologyRegistry",
    "dump_terminology",
    "mrg_filename",
    "publish_terminology",
    "CuratedTextSource",
    "parse_instruction",
    "entry_matches",
    "TerminologyBuilder",
    "ImportCoordinator",
    "ImportResult",
    "RenderConverter",
    "generate_hrg",
    "SUGGESTION_THRESHOLD",
    "suggest",
    "TextEdit",
    "apply_edits",
    "MatchKind",
    "classify_matches",
    "RunReport",
    "render_report",
    "Resolver",
    "ResolvedText",
]
