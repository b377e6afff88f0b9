"""Human-readable glossary command."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from termkit.cli.helpers import collect_options, console, fail
from termkit.glossary.converter import RenderConverter
from termkit.glossary.exceptions import GlossaryError
from termkit.glossary.fetch import DocumentFetcher
from termkit.glossary.hrg import generate_hrg
from termkit.glossary.registry import TerminologyRegistry
from termkit.glossary.scope import load_scope_admin


def hrg_command(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path of the YAML configuration file"),
    scopedir: Optional[str] = typer.Option(None, "--scopedir", "-s", help="Scope directory containing saf.yaml"),
    scopetag: Optional[str] = typer.Option(None, "--scopetag", help="Scope of the MRG (default: own scope)"),
    vsntag: Optional[str] = typer.Option(None, "--vsntag", help="Version of the MRG (default: default MRG)"),
    converter: Optional[str] = typer.Option(
        None, "--converter", help="Converter preset or custom template for each entry"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File to write (default: stdout)"),
) -> None:
    """Render an MRG as a human-readable glossary."""
    try:
        options = collect_options(
            "hrg",
            config,
            {
                "scopedir": scopedir,
                "scopetag": scopetag,
                "vsntag": vsntag,
                "converter": converter,
                "output": output,
            },
            required=("scopedir",),
        )
        with DocumentFetcher() as fetcher:
            admin = load_scope_admin(str(options["scopedir"]), fetcher)
            registry = TerminologyRegistry.for_scope(admin, fetcher)
            terminology = registry.load(
                str(options.get("scopetag") or admin.scope.scopetag),
                options.get("vsntag"),
            )
            text = generate_hrg(terminology, RenderConverter(str(options.get("converter") or "markdowntable")))
    except GlossaryError as e:
        fail(str(e))

    if options.get("output"):
        target = Path(str(options["output"]))
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(text, encoding="utf-8")
        except OSError as e:
            fail(f"Error writing file '{target}': {e}")
        console.print(f"[green]✓[/green] Wrote {target}")
    else:
        typer.echo(text, nl=False)
