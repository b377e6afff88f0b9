"""Term reference interpretation.

A `PatternInterpreter` finds term references in a text buffer with a regular
expression (a named preset or a custom pattern) and decodes every match into
a `TermReference`.
"""

from __future__ import annotations

import logging
import re
from typing import List

from .exceptions import InterpreterError
from .models import TermReference

logger = logging.getLogger(__name__)

# `[showtext@scopetag:vsntag](id#trait)`; the `@scopetag:vsntag` part may be
# omitted, in which case the reference points at the current scope.
ALT_PATTERN = (
    r"(?:(?<=[^`\\])|^)"
    r"\[(?=[^@\]\n]+(?:@[:a-z0-9_-]*)?\]\([#a-z0-9_-]*\))"
    r"(?P<showtext>[^\n\]@]+?)"
    r"(?:@(?P<scopetag>[a-z0-9_-]*)(?::(?P<vsntag>[a-z0-9_-]+?))?)?"
    r"\]"
    r"\((?P<id>[a-z0-9_-]*)(?:#(?P<trait>[a-z0-9_-]+?))?\)"
)

# `[showtext](id#trait@scopetag:vsntag)`; the `@` is mandatory.
BASIC_PATTERN = (
    r"(?:(?<=[^`\\])|^)"
    r"\[(?=[^@\]]+\]\([#a-z0-9_-]*@[:a-z0-9_-]*\))"
    r"(?P<showtext>[^\n\]@]+)"
    r"\]\((?:(?P<id>[a-z0-9_-]*)?(?:#(?P<trait>[a-z0-9_-]+))?)?"
    r"@(?P<scopetag>[a-z0-9_-]*)(?::(?P<vsntag>[a-z0-9_-]+))?\)"
)

PRESETS = {
    "alt": ALT_PATTERN,
    "basic": BASIC_PATTERN,
    "default": ALT_PATTERN,
}

_DELIMITERS = re.compile(r"^/|/[a-z]*$")
_JS_NAMED_GROUP = re.compile(r"\(\?<(?![=!])")
_SLUG_STRIP = re.compile(r"['()]+")
_SLUG_COLLAPSE = re.compile(r"[^a-z0-9_-]+")


def slugify(text: str) -> str:
    """Derive a term id from display text.

    Examples:
        >>> slugify("Example Term")
        'example-term'
        >>> slugify("Party's (Actor)")
        'partys-actor'
    """
    return _SLUG_COLLAPSE.sub("-", _SLUG_STRIP.sub("", text.lower()))


def compile_custom_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a user-supplied pattern.

    Leading `/` and trailing `/flags` are stripped, and JavaScript-style named
    groups `(?<name>...)` are rewritten to Python syntax.

    Raises:
        InterpreterError: If the pattern does not compile or lacks a `showtext` group
    """
    source = _JS_NAMED_GROUP.sub("(?P<", _DELIMITERS.sub("", pattern))
    try:
        compiled = re.compile(source)
    except re.error as e:
        raise InterpreterError(f"Invalid term reference pattern '{pattern}': {e}") from e

    if "showtext" not in compiled.groupindex:
        raise InterpreterError(
            f"Term reference pattern '{pattern}' must define a named group 'showtext'"
        )
    return compiled


class PatternInterpreter:
    """Scans text for term references and decodes them."""

    def __init__(self, pattern: str = "default"):
        key = str(pattern).lower()
        if key in PRESETS:
            self._type = key
            self._regex = re.compile(PRESETS[key])
        else:
            self._type = "custom"
            self._regex = compile_custom_pattern(str(pattern))
        logger.info("Using %s interpreter: '%s'", self._type, self._regex.pattern)

    @property
    def type(self) -> str:
        return self._type

    @property
    def regex(self) -> re.Pattern[str]:
        return self._regex

    def scan(self, text: str) -> List[re.Match[str]]:
        """Return all non-overlapping matches, left to right."""
        return list(self._regex.finditer(text))

    def decode(self, match: re.Match[str]) -> TermReference:
        """
        Decode a raw match into a TermReference.

        The id defaults to the slugified showtext; scopetag and vsntag stay
        empty when the match does not carry them.

        Raises:
            InterpreterError: If the match exposes no named groups
        """
        groups = match.groupdict()
        if not groups or groups.get("showtext") is None:
            raise InterpreterError("Error in evaluating regex pattern. No groups provided")

        showtext = groups["showtext"]
        ref_id = groups.get("id") or slugify(showtext)
        return TermReference(
            showtext=showtext,
            id=ref_id,
            trait=groups.get("trait") or None,
            scopetag=groups.get("scopetag") or None,
            vsntag=groups.get("vsntag") or None,
        )
