"""Pytest fixtures for termkit tests.

Fixtures build a small federation of scopes in tmp_path: an own scope `tev2`
with curated texts and an MRG, and an import scope `essiflab`.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import pytest
from ruamel.yaml import YAML

from termkit.glossary.fetch import DocumentFetcher
from termkit.glossary.models import Entry, Terminology, TerminologyInfo
from termkit.glossary.registry import TerminologyRegistry, dump_terminology
from termkit.glossary.scope import load_scope_admin


def _dump_yaml(data: Any, path: Path) -> None:
    yaml = YAML()
    yaml.default_flow_style = False
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        yaml.dump(data, handle)


@pytest.fixture
def write_mrg() -> Callable[..., Path]:
    """Factory writing an MRG file into a glossary directory."""

    def _write(
        glossary_dir: Path,
        scopetag: str,
        vsntag: str,
        entries: List[Dict[str, Any]],
        filename: Optional[str] = None,
        scopedir: str = "",
    ) -> Path:
        terminology = Terminology(
            info=TerminologyInfo(
                scopetag=scopetag,
                scopedir=scopedir or f"https://example.org/{scopetag}",
                curatedir="terms",
                vsntag=vsntag,
            ),
            entries=[Entry.from_dict(e) for e in entries],
        )
        path = glossary_dir / (filename or terminology.filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_terminology(terminology), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def import_scope_dir(tmp_path: Path, write_mrg) -> Path:
    """Import scope `essiflab` maintaining versions v2 (default) and v3."""
    scope_dir = tmp_path / "essiflab"
    _dump_yaml(
        {
            "scope": {
                "scopetag": "essiflab",
                "scopedir": "https://example.org/essiflab",
                "curatedir": "terms",
                "glossarydir": "glossaries",
                "defaultvsn": "v2",
            },
            "versions": [
                {"vsntag": "v2", "altvsntags": ["v2.1"], "termselection": ["*"]},
                {"vsntag": "v3", "termselection": ["*"]},
            ],
        },
        scope_dir / "saf.yaml",
    )
    for vsntag in ("v2", "v3"):
        write_mrg(
            scope_dir / "glossaries",
            "essiflab",
            vsntag,
            [
                {"term": "party", "scopetag": "essiflab", "glossaryText": "An entity that sets objectives."},
                {"term": "actor", "scopetag": "essiflab", "glossaryText": f"Someone who acts ({vsntag})."},
            ],
        )
    return scope_dir


@pytest.fixture
def scope_dir(tmp_path: Path, write_mrg, import_scope_dir: Path) -> Path:
    """Own scope `tev2` with curated texts, an MRG for v1 and one import scope."""
    root = tmp_path / "tev2"
    _dump_yaml(
        {
            "scope": {
                "scopetag": "tev2",
                "scopedir": "https://example.org/tev2",
                "curatedir": "terms",
                "glossarydir": "glossaries",
                "website": "https://example.org/",
                "navpath": "/docs",
                "defaultvsn": "v1",
            },
            "scopes": [{"scopetag": "essif", "scopedir": str(import_scope_dir)}],
            "versions": [
                {
                    "vsntag": "v1",
                    "altvsntags": ["latest"],
                    "termselection": ["*", "-status[deprecated]"],
                },
            ],
        },
        root / "saf.yaml",
    )

    terms = root / "terms"
    terms.mkdir(parents=True)
    (terms / "example-term.md").write_text(
        "---\n"
        "term: Example Term\n"
        "glossaryText: The definition of an example term.\n"
        "grouptags: [management]\n"
        "status: accepted\n"
        "---\n"
        "# Example Term\n\n"
        "## Summary Notes\n"
        "Body text.\n",
        encoding="utf-8",
    )
    (terms / "old-term.md").write_text(
        "---\nterm: old term\nglossaryText: No longer used.\nstatus: deprecated\n---\nBody\n",
        encoding="utf-8",
    )
    (terms / "sub").mkdir()
    (terms / "sub" / "actor.md").write_text(
        "---\nterm: actor\naltterms: [actors]\nglossaryText: Someone who acts.\nstatus: accepted\n---\n",
        encoding="utf-8",
    )

    write_mrg(
        root / "glossaries",
        "tev2",
        "v1",
        [
            {"term": "Example Term", "scopetag": "tev2", "glossaryText": "The definition of an example term."},
            {"term": "actor", "altterms": ["actors"], "scopetag": "tev2", "glossaryText": "Someone who acts."},
        ],
    )
    return root


@pytest.fixture
def fetcher():
    """Document fetcher cleaned up after the test."""
    with DocumentFetcher() as f:
        yield f


@pytest.fixture
def scope_admin(scope_dir: Path, fetcher):
    return load_scope_admin(str(scope_dir), fetcher)


@pytest.fixture
def registry(scope_admin, fetcher) -> TerminologyRegistry:
    return TerminologyRegistry.for_scope(scope_admin, fetcher)
