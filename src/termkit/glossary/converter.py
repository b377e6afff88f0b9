"""Rendering of matched entries into replacement text.

A `RenderConverter` turns a (matched entry, term reference) pair into text
using a logic-less mustache template: either one of the named presets or a
custom template supplied by the user. Templates may also call the
`capFirst` and `ifValue` helpers with their Handlebars syntax.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import pystache
from pystache.parser import ParsingError

from .exceptions import ConfigError
from .models import Entry, TermReference

logger = logging.getLogger(__name__)

_TAG = re.compile(r"\{\{\s*(.*?)\s*\}\}")
_CAP_FIRST = re.compile(r"^capFirst\s+([^\s}]+)$")
_IF_VALUE = re.compile(r"^#ifValue\s+([^\s}]+)\s+equals=(\"[^\"]*\"|'[^']*'|[^\s}]+)$")

_TRAIT = "{{#trait}}#{{trait}}{{/trait}}"

PRESETS: Dict[str, str] = {
    "markdowntable": "| {{glossaryTerm}} | {{glossaryText}} |",
    "markdown-link": "[{{showtext}}]({{navurl}}" + _TRAIT + ")",
    "html-link": '<a href="{{navurl}}' + _TRAIT + '">{{showtext}}</a>',
    "html-hovertext-link": (
        '<a href="{{navurl}}' + _TRAIT + '" title="'
        "{{#hoverText}}{{hoverText}}{{/hoverText}}{{^hoverText}}{{glossaryText}}{{/hoverText}}"
        '">{{showtext}}</a>'
    ),
    "html-glossarytext-link": '<a href="{{navurl}}' + _TRAIT + '" title="{{glossaryText}}">{{showtext}}</a>',
    "essiflab": '<Term popup="{{glossaryText}}" reference="{{term}}">{{showtext}}</Term>',
}


def render_context(entry: Entry, reference: Optional[TermReference] = None) -> Dict[str, Any]:
    """Entry fields overlaid by the reference properties."""
    context: Dict[str, Any] = dict(entry.to_dict())
    if reference is not None:
        context.update(reference.properties())
    context["term"] = entry.term
    if not context.get("glossaryTerm"):
        context["glossaryTerm"] = entry.term
    return context


def cap_first(text: str) -> str:
    """Capitalize the first letter of every space-separated word."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split(" "))


def _lookup(context: Dict[str, Any], path: str) -> Any:
    value: Any = context
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _literal(token: str) -> Tuple[Any, Optional[str]]:
    """Split an `equals=` argument into (literal value, field path)."""
    if token[:1] in ("'", '"'):
        return token[1:-1], None
    if token in ("true", "false"):
        return token == "true", None
    if re.fullmatch(r"-?\d+", token):
        return int(token), None
    return None, token


@dataclass(frozen=True)
class HelperCall:
    """One helper invocation, rendered through the context key `key`."""

    key: str
    name: str
    field: str
    expected: Any = None
    expected_field: Optional[str] = None

    def evaluate(self, context: Dict[str, Any]) -> Any:
        value = _lookup(context, self.field)
        if self.name == "ifValue":
            expected = self.expected if self.expected_field is None else _lookup(context, self.expected_field)
            return value == expected
        if not value:
            return ""
        if isinstance(value, list):
            value = ",".join(str(v) for v in value)
        return cap_first(str(value))


def compile_helpers(template: str) -> Tuple[str, List[HelperCall]]:
    """Rewrite the `capFirst` and `ifValue` helper tags into mustache tags.

    `{{capFirst field}}` becomes a variable tag and
    `{{#ifValue field equals="x"}}...{{else}}...{{/ifValue}}` becomes a
    section plus an inverted section, each backed by a generated context key
    that `HelperCall.evaluate` fills in at render time.

    Raises:
        ConfigError: If an `ifValue` block is not closed properly
    """
    calls: List[HelperCall] = []
    open_blocks: List[str] = []
    parts: List[str] = []
    pos = 0
    for match in _TAG.finditer(template):
        body = match.group(1)
        replacement = match.group(0)
        cap = _CAP_FIRST.match(body)
        cond = _IF_VALUE.match(body)
        if cap:
            key = f"__capFirst_{len(calls)}"
            calls.append(HelperCall(key, "capFirst", cap.group(1)))
            replacement = "{{" + key + "}}"
        elif cond:
            key = f"__ifValue_{len(calls)}"
            expected, expected_field = _literal(cond.group(2))
            calls.append(HelperCall(key, "ifValue", cond.group(1), expected, expected_field))
            open_blocks.append(key)
            replacement = "{{#" + key + "}}"
        elif body == "else" and open_blocks:
            key = open_blocks[-1]
            replacement = "{{/" + key + "}}{{^" + key + "}}"
        elif body == "/ifValue":
            if not open_blocks:
                raise ConfigError(f"Unmatched '{{{{/ifValue}}}}' in converter template '{template}'")
            replacement = "{{/" + open_blocks.pop() + "}}"
        parts.append(template[pos:match.start()])
        parts.append(replacement)
        pos = match.end()
    if open_blocks:
        raise ConfigError(f"Unclosed '{{{{#ifValue}}}}' in converter template '{template}'")
    parts.append(template[pos:])
    return "".join(parts), calls


class RenderConverter:
    """Renders entries through a preset or custom template."""

    def __init__(self, template: str = "markdowntable"):
        key = str(template).lower()
        if key in PRESETS:
            self._type = key
            self._template = PRESETS[key]
        else:
            self._type = "custom"
            self._template = str(template)

        # Rendered text is spliced into Markdown/HTML as-is: no escaping
        self._renderer = pystache.Renderer(escape=lambda u: u, missing_tags="ignore")
        try:
            source, self._helpers = compile_helpers(self._template)
            self._parsed = pystache.parse(source)
        except ParsingError as e:
            raise ConfigError(f"Invalid converter template '{self._template}': {e}") from e
        logger.info("Using %s template: '%s'", self._type, self._template)

    @property
    def type(self) -> str:
        return self._type

    @property
    def template(self) -> str:
        return self._template

    def convert(self, entry: Entry, reference: Optional[TermReference] = None) -> str:
        """Render the entry; missing keys render as empty text."""
        context = render_context(entry, reference)
        for call in self._helpers:
            context[call.key] = call.evaluate(context)
        return self._renderer.render(self._parsed, context)
