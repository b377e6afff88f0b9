"""Shared helpers for termkit commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, NoReturn, Optional

import typer
from rich.console import Console

from termkit.config import load_config_file, merge_options, require_options
from termkit.glossary.policy import NotExistPolicy, resolve_policy

console = Console()


def fail(message: str) -> NoReturn:
    """Print an error in red on stderr and exit with code 1."""
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(1)


def collect_options(
    section: str,
    config: Optional[Path],
    cli: Dict[str, Any],
    required: Iterable[str] = (),
) -> Dict[str, Any]:
    """Merge config-file options for a command with its command-line options.

    Raises:
        ConfigError: If the config file is unreadable or a required option is missing
    """
    file_options = load_config_file(config, section) if config else {}
    options = merge_options(cli, file_options)
    require_options(options, required)
    return options


def policy_option(options: Dict[str, Any], default: NotExistPolicy) -> NotExistPolicy:
    """The effective not-exist policy, exiting on an invalid value."""
    try:
        return resolve_policy(options.get("on_not_exist"), None, default)
    except ValueError:
        valid = ", ".join(f"'{p.value}'" for p in NotExistPolicy)
        fail(f"Option 'onNotExist' is not set properly. Provide one of the following values: {valid}")
