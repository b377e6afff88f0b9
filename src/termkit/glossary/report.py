"""Append-only record of a resolution run."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True, slots=True)
class TermHelp:
    """A diagnostic about one term reference."""
    file: str
    line: int
    message: str


class RunReport:
    """Collects diagnostics, converted terms, written files and main errors."""

    def __init__(self):
        self._lock = threading.Lock()
        self._term_help: List[TermHelp] = []
        self._converted: List[str] = []
        self._files: List[str] = []
        self._errors: List[str] = []

    def term_help(self, file: str, line: int, message: str) -> None:
        with self._lock:
            self._term_help.append(TermHelp(str(file), line, message))

    def term_converted(self, term: str) -> None:
        with self._lock:
            self._converted.append(term)

    def file_written(self, path: str) -> None:
        with self._lock:
            self._files.append(str(path))

    def error(self, message: str) -> None:
        """Record a main error; identical messages are kept once."""
        with self._lock:
            if message not in self._errors:
                self._errors.append(message)

    @property
    def diagnostics(self) -> Tuple[TermHelp, ...]:
        return tuple(self._term_help)

    @property
    def converted(self) -> Tuple[str, ...]:
        return tuple(self._converted)

    @property
    def files(self) -> Tuple[str, ...]:
        return tuple(self._files)

    @property
    def errors(self) -> Tuple[str, ...]:
        return tuple(self._errors)

    def grouped_term_help(self) -> List[Tuple[str, Dict[str, List[int]]]]:
        """Diagnostics grouped by message (sorted), each with lines per file."""
        grouped: Dict[str, Dict[str, List[int]]] = {}
        for item in self._term_help:
            grouped.setdefault(item.message, {}).setdefault(item.file, []).append(item.line)
        return sorted(grouped.items(), key=lambda kv: kv[0].lower())
