"""Scope administration file (SAF) loading and validation."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .exceptions import ScopeAdminError
from .fetch import DocumentFetcher, join_location, parent_location
from .models import REQUIRED_SCOPE_FIELDS, Scope, ScopeAdmin, ScopeRef, Version

logger = logging.getLogger(__name__)

SAF_FILENAME = "saf.yaml"


def validate_saf(data: Dict[str, Any], location: str) -> None:
    """
    Validate SAF schema.

    Args:
        data: Parsed YAML data
        location: Where the SAF came from (for error messages)

    Raises:
        ScopeAdminError: If the `scope` section or a required field is missing
    """
    if not isinstance(data, dict) or not isinstance(data.get("scope"), dict):
        raise ScopeAdminError(location, "missing 'scope' section")

    missing = [key for key in REQUIRED_SCOPE_FIELDS if not data["scope"].get(key)]
    if missing:
        raise ScopeAdminError(location, f"missing required property '{', '.join(missing)}'")


def parse_saf(data: Dict[str, Any], location: str) -> ScopeAdmin:
    """Turn parsed SAF YAML into a ScopeAdmin."""
    validate_saf(data, location)
    raw = data["scope"]

    scope = Scope(
        scopetag=str(raw["scopetag"]),
        scopedir=str(raw["scopedir"]),
        curatedir=str(raw["curatedir"]),
        glossarydir=str(raw.get("glossarydir") or "glossaries"),
        website=str(raw.get("website") or ""),
        navpath=str(raw.get("navpath") or "/"),
        defaultvsn=str(raw["defaultvsn"]) if raw.get("defaultvsn") is not None else None,
        bodyfileid=str(raw["bodyFileID"]) if raw.get("bodyFileID") else None,
        localscopedir=parent_location(location),
    )

    scopes: List[ScopeRef] = []
    for item in data.get("scopes") or []:
        if isinstance(item, dict) and item.get("scopetag"):
            scopes.append(ScopeRef.from_dict(item))
        else:
            logger.warning("Ignoring malformed scopes entry in SAF at '%s': %r", location, item)

    versions = [Version.from_dict(v) for v in data.get("versions") or [] if isinstance(v, dict)]
    return ScopeAdmin(scope=scope, scopes=scopes, versions=versions)


def load_scope_admin(scopedir: str, fetcher: DocumentFetcher) -> ScopeAdmin:
    """
    Load the SAF of a scope.

    Args:
        scopedir: Local directory or URL of the scope
        fetcher: Document fetcher used for retrieval

    Returns:
        The parsed ScopeAdmin

    Raises:
        FetchError: If the SAF cannot be retrieved
        ScopeAdminError: If the SAF is not valid YAML or lacks required fields
    """
    location = join_location(str(scopedir), SAF_FILENAME)
    text = fetcher.read_text(location)

    yaml = YAML(typ="safe")
    try:
        data = yaml.load(text)
    except YAMLError as e:
        raise ScopeAdminError(location, f"YAML parsing error: {e}") from e

    admin = parse_saf(data, location)
    logger.debug("Loaded SAF of scope '%s' from %s", admin.scope.scopetag, location)
    return admin
