"""Tests for the `termkit import` command."""

from typer.testing import CliRunner

from termkit.cli import app

runner = CliRunner()


class TestImportCommand:
    """Test importing MRGs of the SAF's import scopes."""

    def test_imports_every_version(self, scope_dir):
        result = runner.invoke(app, ["import", "-s", str(scope_dir)])

        assert result.exit_code == 0, result.output
        assert "4 MRG file(s) written" in result.output
        assert (scope_dir / "glossaries" / "mrg.essif.v2.1.yaml").is_file()

    def test_prune(self, scope_dir, write_mrg):
        write_mrg(scope_dir / "glossaries", "retired", "v1", [{"term": "x"}], filename="mrg.retired.yaml")

        result = runner.invoke(app, ["import", "-s", str(scope_dir), "--prune"])

        assert result.exit_code == 0, result.output
        assert "Pruned mrg.retired.yaml" in result.output
        assert not (scope_dir / "glossaries" / "mrg.retired.yaml").exists()

    def test_missing_import_scope_throws_by_default(self, tmp_path):
        (tmp_path / "saf.yaml").write_text(
            "scope:\n"
            "  scopetag: solo\n"
            "  scopedir: d\n"
            "  curatedir: terms\n"
            "scopes:\n"
            "  - scopetag: ghost\n"
            f"    scopedir: {tmp_path / 'ghost'}\n",
            encoding="utf-8",
        )
        result = runner.invoke(app, ["import", "-s", str(tmp_path)])
        assert result.exit_code == 1
        assert "halting execution" in result.output

    def test_missing_import_scope_with_warn(self, tmp_path):
        (tmp_path / "saf.yaml").write_text(
            "scope:\n"
            "  scopetag: solo\n"
            "  scopedir: d\n"
            "  curatedir: terms\n"
            "scopes:\n"
            "  - scopetag: ghost\n"
            f"    scopedir: {tmp_path / 'ghost'}\n",
            encoding="utf-8",
        )
        result = runner.invoke(app, ["import", "-s", str(tmp_path), "--on-not-exist", "warn"])
        assert result.exit_code == 0, result.output
        assert "0 MRG file(s) written" in result.output
        assert "1 import(s) failed" in result.output
