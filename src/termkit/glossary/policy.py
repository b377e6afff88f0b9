"""Policy for references to glossaries that cannot be retrieved.

Every tool that follows a reference to another scope (resolver, importer,
builder) hands fetch-not-exist failures to a `NotExistPolicy`, which decides
whether the run halts, warns, logs quietly or carries on silently.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from .exceptions import NotExistAbort

logger = logging.getLogger(__name__)


class NotExistPolicy(StrEnum):
    """Reaction to a missing SAF or MRG.

    - THROW: Abort the whole run (raises NotExistAbort)
    - WARN: Log a warning and continue
    - LOG: Log at info level and continue
    - IGNORE: Continue silently
    """

    THROW = "throw"
    WARN = "warn"
    LOG = "log"
    IGNORE = "ignore"

    def handle(self, err: Exception) -> None:
        """Apply the policy to a fetch-not-exist failure.

        Args:
            err: The failure that was caught

        Raises:
            NotExistAbort: If the policy is THROW
        """
        if self is NotExistPolicy.THROW:
            raise NotExistAbort(err) from err
        if self is NotExistPolicy.WARN:
            logger.warning("%s", err)
        elif self is NotExistPolicy.LOG:
            logger.info("%s", err)


def resolve_policy(
    cli_value: str | None,
    config_value: str | None,
    default: NotExistPolicy,
) -> NotExistPolicy:
    """Resolve the effective policy: CLI flag, then config file, then default.

    Raises:
        ValueError: If the winning value is not a policy name

    Examples:
        >>> resolve_policy(None, "log", NotExistPolicy.WARN)
        <NotExistPolicy.LOG: 'log'>

        >>> resolve_policy("Ignore", "log", NotExistPolicy.WARN)
        <NotExistPolicy.IGNORE: 'ignore'>
    """
    for value in (cli_value, config_value):
        if value is not None and str(value) != "":
            return NotExistPolicy(str(value).lower())
    return default
