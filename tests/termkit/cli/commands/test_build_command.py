"""Tests for the `termkit build` command."""

from ruamel.yaml import YAML
from typer.testing import CliRunner

from termkit.cli import app
from termkit.glossary.registry import parse_terminology

runner = CliRunner()


def _add_selection(scope_dir, instruction):
    """Append an instruction to the termselection of the first SAF version."""
    yaml = YAML()
    saf = scope_dir / "saf.yaml"
    data = yaml.load(saf)
    data["versions"][0]["termselection"].append(instruction)
    yaml.dump(data, saf)


class TestBuildCommand:
    """Test MRG construction from the SAF."""

    def test_builds_all_versions(self, scope_dir):
        result = runner.invoke(app, ["build", "-s", str(scope_dir)])

        assert result.exit_code == 0, result.output
        assert "mrg.tev2.v1.yaml: 2 entries (3 files written)" in result.output

        glossaries = scope_dir / "glossaries"
        canonical = (glossaries / "mrg.tev2.v1.yaml").read_text(encoding="utf-8")
        assert (glossaries / "mrg.tev2.yaml").read_text(encoding="utf-8") == canonical
        assert (glossaries / "mrg.tev2.latest.yaml").read_text(encoding="utf-8") == canonical

        terminology = parse_terminology(canonical, "mrg.tev2.v1.yaml")
        assert [e.term for e in terminology.entries] == ["actor", "Example Term"]
        assert terminology.info.altvsntags == ["latest"]

    def test_build_by_alias(self, scope_dir):
        result = runner.invoke(app, ["build", "-s", str(scope_dir), "--vsntag", "latest"])
        assert result.exit_code == 0, result.output
        assert "mrg.tev2.v1.yaml" in result.output

    def test_unknown_vsntag(self, scope_dir):
        result = runner.invoke(app, ["build", "-s", str(scope_dir), "--vsntag", "v9"])
        assert result.exit_code == 1
        assert "The specified vsntag 'v9' was not found in the SAF" in result.output

    def test_selection_from_imported_mrg(self, scope_dir, write_mrg):
        write_mrg(
            scope_dir / "glossaries",
            "essif",
            "v2",
            [{"term": "party", "glossaryText": "Imported party."}],
            filename="mrg.essif.yaml",
        )
        _add_selection(scope_dir, "*@essif")

        result = runner.invoke(app, ["build", "-s", str(scope_dir)])

        assert result.exit_code == 0, result.output
        text = (scope_dir / "glossaries" / "mrg.tev2.v1.yaml").read_text(encoding="utf-8")
        terminology = parse_terminology(text, "mrg.tev2.v1.yaml")
        assert "party" in [e.term for e in terminology.entries]
        assert [s.scopetag for s in terminology.scopes] == ["essif"]

    def test_throw_on_missing_mrg(self, scope_dir):
        _add_selection(scope_dir, "*@ghost")
        result = runner.invoke(app, ["build", "-s", str(scope_dir), "--onNotExist", "throw"])
        assert result.exit_code == 1
        assert "halting execution" in result.output

    def test_missing_scopedir(self):
        result = runner.invoke(app, ["build"])
        assert result.exit_code == 1
        assert "--scopedir" in result.output
