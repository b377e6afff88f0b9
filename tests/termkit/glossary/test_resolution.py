"""Tests for term reference resolution in documents."""

from pathlib import Path

import pytest

from termkit.glossary.converter import RenderConverter
from termkit.glossary.exceptions import NotExistAbort, TerminologyLoadError
from termkit.glossary.interpreter import PatternInterpreter
from termkit.glossary.policy import NotExistPolicy
from termkit.glossary.report import RunReport
from termkit.glossary.resolution import Resolver, line_of, mirror_path


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run from tmp_path so output paths mirror relative input paths."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "docs").mkdir()
    return tmp_path


@pytest.fixture
def make_resolver(scope_admin, registry, workdir):
    def _make(converter="markdowntable", interpreter="default", force=False, policy=NotExistPolicy.WARN):
        return Resolver(
            admin=scope_admin,
            interpreter=PatternInterpreter(interpreter),
            converter=RenderConverter(converter),
            registry=registry,
            report=RunReport(),
            output_dir=workdir / "out",
            force=force,
            policy=policy,
        )

    return _make


def _messages(resolver):
    return [d.message for d in resolver.report.diagnostics]


class TestResolveText:
    """Test resolution of a single document."""

    def test_default_scope_markdowntable(self, make_resolver):
        resolver = make_resolver()
        result = resolver.resolve_text("Intro\n[Example Term]()\n", "doc.md")
        assert result.converted == 1
        assert result.text == "Intro\n| Example Term | The definition of an example term. |\n"
        assert resolver.report.converted == ("Example Term",)

    def test_altterm_and_link_converter(self, make_resolver):
        resolver = make_resolver(converter="markdown-link")
        result = resolver.resolve_text("Two [Actors](actors#purpose) met.", "doc.md")
        assert result.text == "Two [Actors](#purpose) met."

    def test_unmatched_text_is_preserved(self, make_resolver):
        """Only matched spans change; everything else is byte-identical."""
        text = "a [Example Term]() b [unknown thing]() c [site](https://x.org) d [actor]()"
        result = make_resolver(converter="{{term}}").resolve_text(text, "doc.md")
        assert result.text == "a Example Term b [unknown thing]() c [site](https://x.org) d actor"
        assert result.converted == 2

    def test_front_matter_is_skipped(self, make_resolver):
        text = "---\ntitle: see [actor]()\n---\nBody [actor]()\n"
        result = make_resolver(converter="{{term}}").resolve_text(text, "doc.md")
        assert result.text == "---\ntitle: see [actor]()\n---\nBody actor\n"

    def test_unknown_term_suggests(self, make_resolver):
        resolver = make_resolver()
        result = resolver.resolve_text("line one\n[Exmple Term@tev2]()\n", "doc.md")
        assert result.converted == 0
        (diagnostic,) = resolver.report.diagnostics
        assert diagnostic.line == 2
        assert diagnostic.message == (
            "Term ref '[Exmple Term@tev2]()' > 'exmple-term@tev2:v1', could not be matched with an MRG entry,"
            " did you mean 'Example Term@tev2:v1'?"
        )

    def test_unknown_term_without_suggestion(self, make_resolver):
        resolver = make_resolver()
        resolver.resolve_text("[zebra crossing]()", "doc.md")
        assert _messages(resolver) == [
            "Term ref '[zebra crossing]()' > 'zebra-crossing@tev2:v1', could not be matched with an MRG entry"
        ]

    def test_multiple_matches(self, make_resolver, scope_dir, write_mrg):
        write_mrg(
            scope_dir / "glossaries",
            "tev2",
            "v2",
            [
                {"term": "party", "locator": "party.md"},
                {"term": "agent", "altterms": ["party"], "locator": "agent.md"},
            ],
        )
        resolver = make_resolver()
        resolver.resolve_text("[party@tev2:v2]()", "doc.md")
        assert _messages(resolver) == [
            "Term ref '[party@tev2:v2]()' > 'party@tev2:v2', has multiple matching MRG entries in 'party.md, agent.md'"
        ]

    def test_literal_match_wins_over_slug_match(self, make_resolver, scope_dir, write_mrg):
        write_mrg(
            scope_dir / "glossaries",
            "tev2",
            "v2",
            [{"term": "actor", "locator": "a.md"}, {"term": "Actor", "locator": "b.md"}],
        )
        resolver = make_resolver(converter="{{term}}/{{locator}}")
        result = resolver.resolve_text("[x@tev2:v2](actor) [Actor@tev2:v2]()", "doc.md")
        assert result.text == "actor/a.md actor/a.md"
        assert result.converted == 2
        assert resolver.report.diagnostics == ()

    def test_shorter_equal_and_longer_replacements(self, make_resolver, scope_dir, write_mrg):
        """Replacements of every length relative to their match splice in place."""
        write_mrg(
            scope_dir / "glossaries",
            "tev2",
            "v3",
            [
                {"term": "long", "glossaryText": "S"},
                {"term": "same", "glossaryText": "exactly-17-chars!"},
                {"term": "grow", "glossaryText": "a much longer replacement text"},
            ],
        )
        text = "1 [L@tev2:v3](long) 2 [E@tev2:v3](same) 3 [G@tev2:v3](grow) 4\n"
        assert len("[E@tev2:v3](same)") == len("exactly-17-chars!")

        result = make_resolver(converter="{{glossaryText}}").resolve_text(text, "doc.md")

        assert result.converted == 3
        assert result.text == "1 S 2 exactly-17-chars! 3 a much longer replacement text 4\n"

    def test_other_scope_default_version(self, make_resolver, scope_dir, write_mrg):
        """A reference to another scope without vsntag uses its default MRG."""
        write_mrg(
            scope_dir / "glossaries",
            "essif",
            "v2",
            [{"term": "party", "glossaryText": "Imported party."}],
            filename="mrg.essif.yaml",
        )
        result = make_resolver().resolve_text("[Party@essif](party)", "doc.md")
        assert result.text == "| party | Imported party. |"

    def test_missing_mrg_with_warn(self, make_resolver):
        resolver = make_resolver()
        result = resolver.resolve_text("[party@nowhere:v1]()", "doc.md")
        assert result.converted == 0
        (message,) = _messages(resolver)
        assert message.startswith("Term ref '[party@nowhere:v1]()' > 'party@nowhere:v1', MRG file")

    def test_missing_mrg_with_throw(self, make_resolver):
        resolver = make_resolver(policy=NotExistPolicy.THROW)
        with pytest.raises(NotExistAbort):
            resolver.resolve_text("[party@nowhere:v1]()", "doc.md")

    def test_broken_mrg_is_fatal(self, make_resolver, scope_dir):
        (scope_dir / "glossaries" / "mrg.tev2.v7.yaml").write_text("entries: []\n", encoding="utf-8")
        with pytest.raises(TerminologyLoadError):
            make_resolver().resolve_text("[actor@tev2:v7]()", "doc.md")

    def test_empty_render(self, make_resolver):
        resolver = make_resolver(converter="{{hoverText}}")
        result = resolver.resolve_text("[actor]()", "doc.md")
        assert result.converted == 0
        assert _messages(resolver) == [
            "Term ref '[actor]()' > 'actor@tev2:v1', resulted in an empty string, check the converter"
        ]

    def test_basic_interpreter(self, make_resolver):
        result = make_resolver(converter="{{term}}", interpreter="basic").resolve_text(
            "[Actors](actor@) and [Actors](actor@tev2:v1)", "doc.md"
        )
        assert result.text == "actor and actor"


class TestResolveFiles:
    """Test glob-driven resolution and output files."""

    def test_writes_only_modified_files(self, make_resolver, workdir):
        (workdir / "docs" / "with-ref.md").write_text("See [actor]().\n", encoding="utf-8")
        (workdir / "docs" / "plain.md").write_text("Nothing here.\n", encoding="utf-8")
        resolver = make_resolver(converter="{{term}}")

        assert resolver.resolve("docs/*.md")

        assert (workdir / "out" / "docs" / "with-ref.md").read_text(encoding="utf-8") == "See actor.\n"
        assert not (workdir / "out" / "docs" / "plain.md").exists()
        assert resolver.report.files == (str(workdir / "out" / "docs" / "with-ref.md"),)

    def test_recursive_glob(self, make_resolver, workdir):
        nested = workdir / "docs" / "deep" / "er"
        nested.mkdir(parents=True)
        (nested / "page.md").write_text("[actor]()", encoding="utf-8")
        make_resolver(converter="{{term}}").resolve("docs/**/*.md")
        assert (workdir / "out" / "docs" / "deep" / "er" / "page.md").read_text(encoding="utf-8") == "actor"

    def test_existing_output_requires_force(self, make_resolver, workdir):
        (workdir / "docs" / "page.md").write_text("[actor]()", encoding="utf-8")
        make_resolver().resolve("docs/*.md")

        again = make_resolver()
        again.resolve("docs/*.md")
        (error,) = again.report.errors
        assert error.startswith("E013 File")
        assert error.endswith("already exists. Use --force to overwrite")
        assert again.report.files == ()

    def test_force_rerun_is_idempotent(self, make_resolver, workdir):
        (workdir / "docs" / "page.md").write_text("Intro [Example Term]() end\n", encoding="utf-8")
        output = workdir / "out" / "docs" / "page.md"

        make_resolver(force=True).resolve("docs/*.md")
        first = output.read_text(encoding="utf-8")
        make_resolver(force=True).resolve("docs/*.md")
        assert output.read_text(encoding="utf-8") == first

    def test_unreadable_file_is_reported(self, make_resolver, workdir):
        (workdir / "docs" / "binary.md").write_bytes(b"\xff\xfe\x00[actor]()")
        resolver = make_resolver()
        resolver.resolve("docs/*.md")
        (error,) = resolver.report.errors
        assert error.startswith("E009 Could not read file")


class TestHelpers:
    """Test path and line helpers."""

    def test_line_of(self):
        text = "a\nb\nc"
        assert line_of(text, 0) == 1
        assert line_of(text, text.index("c")) == 3

    def test_mirror_relative_path(self, tmp_path):
        assert mirror_path(tmp_path / "out", Path("docs/a.md")) == tmp_path / "out" / "docs" / "a.md"

    def test_mirror_absolute_path_under_cwd(self, workdir):
        assert mirror_path(Path("out"), workdir / "docs" / "a.md") == Path("out") / "docs" / "a.md"
