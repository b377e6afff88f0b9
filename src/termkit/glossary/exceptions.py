"""Exception hierarchy for term reference resolution."""

from __future__ import annotations


class GlossaryError(Exception):
    """Base exception for glossary errors."""
    pass


class ConfigError(GlossaryError):
    """Missing or unreadable tool configuration. Aborts the run."""
    pass


class FetchError(GlossaryError):
    """A local file or remote document could not be retrieved."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Could not retrieve '{location}': {reason}")


class ScopeAdminError(GlossaryError):
    """Scope administration file (SAF) is missing required fields or unparseable."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Invalid SAF at '{location}': {reason}")


class InterpreterError(GlossaryError):
    """Term reference pattern is malformed or a match cannot be decoded."""
    pass


class InstructionError(GlossaryError):
    """A termselection instruction could not be parsed."""

    def __init__(self, instruction: str, reason: str = "invalid syntax"):
        self.instruction = instruction
        super().__init__(f"Invalid instruction '{instruction}': {reason}")


class RegistryNotFoundError(GlossaryError):
    """A referenced MRG file (or SAF) could not be retrieved."""

    def __init__(self, location: str, reason: str | None = None):
        self.location = location
        message = f"MRG file '{location}' could not be retrieved"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class TerminologyLoadError(GlossaryError):
    """A retrieved MRG file is unparseable or lacks required terminology fields."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Could not load MRG at '{location}': {reason}")


class NotExistAbort(GlossaryError):
    """Raised by the 'throw' not-exist policy to halt the whole run."""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(
            f"{cause}, halting execution as requested by the 'onNotExist' throw option"
        )
