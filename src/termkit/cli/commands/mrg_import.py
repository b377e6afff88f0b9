"""MRG import command.

Copies the MRGs of every scope in the SAF's import list into the own
glossary directory, relabelled with the scopetag the own SAF uses for them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from termkit.cli.helpers import collect_options, console, fail, policy_option
from termkit.glossary.exceptions import GlossaryError
from termkit.glossary.fetch import DocumentFetcher
from termkit.glossary.importer import ImportCoordinator
from termkit.glossary.policy import NotExistPolicy
from termkit.glossary.scope import load_scope_admin


def import_command(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path of the YAML configuration file"),
    scopedir: Optional[str] = typer.Option(None, "--scopedir", "-s", help="Scope directory containing saf.yaml"),
    on_not_exist: Optional[str] = typer.Option(
        None, "--on-not-exist", "--onNotExist", help="Action when an MRG does not exist: throw, warn, log, ignore"
    ),
    prune: Optional[bool] = typer.Option(
        None, "--prune", "-p", help="Delete MRGs of scopes that are not administered in the SAF"
    ),
) -> None:
    """Import the MRGs of the scopes listed in the SAF."""
    try:
        options = collect_options(
            "import",
            config,
            {"scopedir": scopedir, "on_not_exist": on_not_exist, "prune": prune},
            required=("scopedir",),
        )
    except GlossaryError as e:
        fail(str(e))

    policy = policy_option(options, NotExistPolicy.THROW)
    try:
        with DocumentFetcher() as fetcher:
            admin = load_scope_admin(str(options["scopedir"]), fetcher)
            result = ImportCoordinator(admin, fetcher, policy).run(prune=bool(options.get("prune")))
    except GlossaryError as e:
        fail(str(e))

    for path in result.pruned:
        console.print(f"[yellow]-[/yellow] Pruned {path.name}")
    console.print(f"[green]✓[/green] {len(result.written)} MRG file(s) written")
    if result.failures:
        console.print(f"[yellow]{len(result.failures)} import(s) failed[/yellow]")
