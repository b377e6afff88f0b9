"""CLI command modules for termkit.

Each module implements one top-level command; `register_commands` attaches
them to the root application.
"""

import typer

from . import build, hrg, mrg_import, resolve


def register_commands(app: typer.Typer) -> None:
    """Attach every termkit command to the root app."""
    app.command("resolve")(resolve.resolve_command)
    app.command("build")(build.build_command)
    app.command("import")(mrg_import.import_command)
    app.command("hrg")(hrg.hrg_command)


__all__ = ["register_commands"]
