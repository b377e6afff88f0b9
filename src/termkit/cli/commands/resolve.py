"""Term reference resolution command.

Reads every document matching the input glob, replaces resolvable term
references with rendered text, and writes modified documents to the output
directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from termkit.cli.helpers import collect_options, console, fail, policy_option
from termkit.glossary.converter import RenderConverter
from termkit.glossary.exceptions import GlossaryError
from termkit.glossary.fetch import DocumentFetcher
from termkit.glossary.interpreter import PatternInterpreter
from termkit.glossary.policy import NotExistPolicy
from termkit.glossary.registry import TerminologyRegistry
from termkit.glossary.rendering import render_report
from termkit.glossary.report import RunReport
from termkit.glossary.resolution import Resolver
from termkit.glossary.scope import load_scope_admin

logger = logging.getLogger(__name__)


def resolve_command(
    input_pattern: Optional[str] = typer.Argument(
        None, metavar="INPUT", help="Glob pattern of the files to resolve"
    ),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path of the YAML configuration file"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Directory to write resolved files to"),
    scopedir: Optional[str] = typer.Option(None, "--scopedir", "-s", help="Scope directory of the documents"),
    interpreter: Optional[str] = typer.Option(
        None, "--interpreter", "-i", help="Interpreter preset (alt, basic) or a custom regex"
    ),
    converter: Optional[str] = typer.Option(
        None, "--converter", help="Converter preset (e.g. markdowntable, markdown-link) or a custom template"
    ),
    force: Optional[bool] = typer.Option(None, "--force", "-f", help="Overwrite existing output files"),
    on_not_exist: Optional[str] = typer.Option(
        None, "--on-not-exist", "--onNotExist", help="Action when an MRG does not exist: throw, warn, log, ignore"
    ),
) -> None:
    """Resolve term references in documents."""
    try:
        options = collect_options(
            "resolve",
            config,
            {
                "input": input_pattern,
                "output": output,
                "scopedir": scopedir,
                "interpreter": interpreter,
                "converter": converter,
                "force": force,
                "on_not_exist": on_not_exist,
            },
            required=("input", "output", "scopedir"),
        )
    except GlossaryError as e:
        fail(str(e))

    policy = policy_option(options, NotExistPolicy.WARN)
    report = RunReport()
    try:
        with DocumentFetcher() as fetcher:
            admin = load_scope_admin(str(options["scopedir"]), fetcher)
            resolver = Resolver(
                admin=admin,
                interpreter=PatternInterpreter(str(options.get("interpreter") or "default")),
                converter=RenderConverter(str(options.get("converter") or "markdowntable")),
                registry=TerminologyRegistry.for_scope(admin, fetcher),
                report=report,
                output_dir=Path(str(options["output"])),
                force=bool(options.get("force")),
                policy=policy,
            )
            resolver.resolve(str(options["input"]))
    except GlossaryError as e:
        render_report(console, report)
        fail(str(e))

    render_report(console, report)
    logger.info("Resolution finished")
