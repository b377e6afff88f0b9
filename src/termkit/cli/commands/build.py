"""MRG construction command.

Builds the terminology of one or all versions in the scope's SAF and
publishes each as `mrg.<scopetag>.<vsntag>.yaml` in the glossary directory,
with alias copies for the default version and alternative version tags.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from termkit.cli.helpers import collect_options, console, fail, policy_option
from termkit.glossary.builder import TerminologyBuilder
from termkit.glossary.curated import CuratedTextSource
from termkit.glossary.exceptions import GlossaryError
from termkit.glossary.fetch import DocumentFetcher
from termkit.glossary.policy import NotExistPolicy
from termkit.glossary.registry import TerminologyRegistry, dump_terminology, publish_terminology
from termkit.glossary.scope import load_scope_admin

logger = logging.getLogger(__name__)


def build_command(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path of the YAML configuration file"),
    scopedir: Optional[str] = typer.Option(None, "--scopedir", "-s", help="Scope directory containing saf.yaml"),
    vsntag: Optional[str] = typer.Option(None, "--vsntag", help="Build only this version (default: all)"),
    on_not_exist: Optional[str] = typer.Option(
        None, "--on-not-exist", "--onNotExist", help="Action when an MRG does not exist: throw, warn, log, ignore"
    ),
) -> None:
    """Build machine-readable glossaries from the SAF's term selections."""
    try:
        options = collect_options(
            "build",
            config,
            {"scopedir": scopedir, "vsntag": vsntag, "on_not_exist": on_not_exist},
            required=("scopedir",),
        )
    except GlossaryError as e:
        fail(str(e))

    policy = policy_option(options, NotExistPolicy.WARN)
    try:
        with DocumentFetcher() as fetcher:
            admin = load_scope_admin(str(options["scopedir"]), fetcher)
            scope = admin.scope

            versions = admin.versions
            if options.get("vsntag"):
                version = admin.find_version(str(options["vsntag"]))
                if version is None:
                    fail(f"The specified vsntag '{options['vsntag']}' was not found in the SAF")
                versions = [version]
            if not versions:
                fail(f"No versions found in SAF of scope '{scope.scopetag}'")

            registry = TerminologyRegistry.for_scope(admin, fetcher)
            builder = TerminologyBuilder(admin, registry, CuratedTextSource(scope), policy=policy)
            glossary_dir = Path(scope.localscopedir or scope.scopedir) / scope.glossarydir

            for version in versions:
                logger.info("Building MRG for version '%s'", version.vsntag)
                terminology = builder.build(version)
                is_default = scope.defaultvsn is not None and (
                    version.vsntag == scope.defaultvsn or scope.defaultvsn in version.altvsntags
                )
                written = publish_terminology(
                    glossary_dir,
                    scope.scopetag,
                    version.vsntag,
                    version.altvsntags,
                    is_default,
                    dump_terminology(terminology),
                )
                # Later versions may select from the ones built before them
                for path in written:
                    registry.put(terminology, path.name)

                console.print(
                    f"[green]✓[/green] {terminology.filename}: {len(terminology.entries)} entries"
                    f" ({len(written)} file{'s' if len(written) != 1 else ''} written)"
                )
    except (GlossaryError, OSError) as e:
        fail(str(e))
