"""Import of other scopes' MRGs into the current scope's glossary directory."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .exceptions import FetchError, RegistryNotFoundError, ScopeAdminError, TerminologyLoadError
from .fetch import DocumentFetcher, join_location
from .models import ScopeAdmin, ScopeRef, Terminology, Version
from .policy import NotExistPolicy
from .registry import TerminologyRegistry, dump_terminology, mrg_filename, publish_terminology
from .scope import load_scope_admin

logger = logging.getLogger(__name__)

_MRG_NAME = re.compile(r"^mrg\.([a-z0-9_-]+)(?:\..+)?\.yaml$")

# Failures that affect one import scope or version; handed to the not-exist policy
_RECOVERABLE = (FetchError, ScopeAdminError, RegistryNotFoundError, TerminologyLoadError, OSError)


@dataclass
class ImportResult:
    """Outcome of an import run."""
    written: List[Path] = field(default_factory=list)
    failures: List[str] = field(default_factory=list)
    pruned: List[Path] = field(default_factory=list)


def restamp(terminology: Terminology, ref: ScopeRef) -> Terminology:
    """Relabel an imported terminology with the scope reference of the importer."""
    terminology.info.scopetag = ref.scopetag
    terminology.info.scopedir = ref.scopedir
    for entry in terminology.entries:
        entry.scopetag = ref.scopetag
    return terminology


class ImportCoordinator:
    """Copies the MRGs of every import scope into the own glossary directory."""

    def __init__(
        self,
        admin: ScopeAdmin,
        fetcher: DocumentFetcher,
        policy: NotExistPolicy = NotExistPolicy.THROW,
    ):
        self.admin = admin
        self.fetcher = fetcher
        self.policy = policy

    @property
    def glossary_dir(self) -> Path:
        scope = self.admin.scope
        return Path(scope.localscopedir or scope.scopedir) / scope.glossarydir

    def run(self, prune: bool = False) -> ImportResult:
        """
        Import every version of every import scope.

        Args:
            prune: First delete MRGs of scopes the SAF no longer administers

        Returns:
            ImportResult listing written files and recorded failures

        Raises:
            NotExistAbort: If the policy is 'throw' and something is missing
        """
        result = ImportResult()
        if prune:
            result.pruned = self.prune()

        if not self.admin.scopes:
            logger.warning("No import scopes found in SAF of scope '%s'", self.admin.scope.scopetag)
            return result

        logger.info(
            "Found %d import scope%s in scopedir '%s'",
            len(self.admin.scopes),
            "s" if len(self.admin.scopes) > 1 else "",
            self.admin.scope.scopedir,
        )
        for ref in self.admin.scopes:
            self._import_scope(ref, result)
        return result

    def _import_scope(self, ref: ScopeRef, result: ImportResult) -> None:
        logger.info("Handling import scope '%s'", ref.scopetag)
        try:
            remote = load_scope_admin(ref.scopedir, self.fetcher)
        except _RECOVERABLE as e:
            result.failures.append(str(e))
            self.policy.handle(e)
            return

        if not remote.versions:
            logger.warning("No maintained MRG files found in import scope '%s'", ref.scopetag)
            return

        registry = TerminologyRegistry(join_location(ref.scopedir, remote.scope.glossarydir), self.fetcher)
        for version in remote.versions:
            try:
                result.written.extend(self._import_version(ref, remote, registry, version))
            except _RECOVERABLE as e:
                result.failures.append(str(e))
                self.policy.handle(e)

    def _import_version(
        self,
        ref: ScopeRef,
        remote: ScopeAdmin,
        registry: TerminologyRegistry,
        version: Version,
    ) -> List[Path]:
        location = join_location(registry.glossary_location, mrg_filename(remote.scope.scopetag, version.vsntag))
        terminology = restamp(registry.load_file(location), ref)

        defaultvsn = remote.scope.defaultvsn
        is_default = defaultvsn is not None and (
            version.vsntag == defaultvsn or defaultvsn in version.altvsntags
        )
        logger.info("Storing MRG file '%s' in '%s'", mrg_filename(ref.scopetag, version.vsntag), self.glossary_dir)
        return publish_terminology(
            self.glossary_dir,
            ref.scopetag,
            version.vsntag,
            version.altvsntags,
            is_default,
            dump_terminology(terminology),
        )

    def prune(self) -> List[Path]:
        """Delete MRGs whose scopetag is neither the own scope nor an import scope."""
        logger.info("Pruning MRGs of scopes that are not administered in the SAF...")
        keep = {self.admin.scope.scopetag} | {ref.scopetag for ref in self.admin.scopes}

        deleted: List[Path] = []
        if not self.glossary_dir.is_dir():
            return deleted
        for path in sorted(self.glossary_dir.glob("mrg.*.yaml")):
            match = _MRG_NAME.match(path.name)
            if match is None or match.group(1) in keep:
                continue
            logger.debug("Deleting '%s'", path.name)
            path.unlink()
            deleted.append(path)
        return deleted
