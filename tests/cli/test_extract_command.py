"""Tests for msgscan extract command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from msgscan.cli.main import cli

runner = CliRunner()

CONFIG_YAML = """\
extractors:
  - callees: [t]
    arguments: {text: 0, text_plural: 1, context: 2}
locations:
  - pattern: {kind: function_declaration, name: t, capture: true}
    identifier: t
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A directory with a config file and two sources."""
    (tmp_path / "msgscan.yaml").write_text(CONFIG_YAML)
    (tmp_path / "a.js").write_text("function t(s) { return s; }\nt('Apple', 'Apples');\n")
    (tmp_path / "b.ts").write_text("t('Pear', null, 'fruit');\n")
    return tmp_path


class TestExtractCommand:
    """msgscan extract."""

    def test_prints_messages_as_json(self, project: Path) -> None:
        result = runner.invoke(
            cli,
            ["extract", str(project / "a.js"), str(project / "b.ts"), "-c", str(project / "msgscan.yaml")],
        )

        assert result.exit_code == 0, result.output
        messages = json.loads(result.stdout)
        assert [(m["context"], m["text"], m["text_plural"]) for m in messages] == [
            (None, "Apple", "Apples"),
            ("fruit", "Pear", None),
        ]

    def test_writes_definitions(self, project: Path) -> None:
        out = project / "definitions.json"

        result = runner.invoke(
            cli,
            [
                "extract",
                str(project / "a.js"),
                "--config",
                str(project / "msgscan.yaml"),
                "--definitions",
                str(out),
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        (entries,) = data.values()
        assert [entry["definition"] for entry in entries] == [True, False]
        assert entries[1]["stripped"] == "t()"

    def test_component_files_are_skipped(self, project: Path) -> None:
        (project / "App.vue").write_text("<script>t('x')</script>")

        result = runner.invoke(
            cli,
            ["extract", str(project / "App.vue"), "-c", str(project / "msgscan.yaml")],
        )

        assert result.exit_code == 0
        assert "Skipping" in result.stderr
        assert json.loads(result.stdout) == []

    def test_missing_extractors_fails(self, tmp_path: Path) -> None:
        config = tmp_path / "empty.yaml"
        config.write_text("logging:\n  level: INFO\n")
        source = tmp_path / "a.js"
        source.write_text("t('a');")

        result = runner.invoke(cli, ["extract", str(source), "-c", str(config)])

        assert result.exit_code != 0
        assert "No extractors configured" in result.output

    def test_plural_conflict_fails(self, project: Path) -> None:
        (project / "c.js").write_text("t('Apple', 'Applez');\n")

        result = runner.invoke(
            cli,
            [
                "extract",
                str(project / "a.js"),
                str(project / "c.js"),
                "-c",
                str(project / "msgscan.yaml"),
            ],
        )

        assert result.exit_code != 0
        assert "PLURAL_CONFLICT" in result.output

    def test_stats_table(self, project: Path) -> None:
        result = runner.invoke(
            cli,
            ["extract", str(project / "a.js"), "-c", str(project / "msgscan.yaml"), "--stats"],
        )

        assert result.exit_code == 0
        assert "message usages" in result.stderr

    def test_undecodable_file_is_skipped(self, project: Path) -> None:
        (project / "latin1.js").write_bytes(b"t('caf\xe9');\n")

        result = runner.invoke(
            cli,
            [
                "extract",
                str(project / "latin1.js"),
                str(project / "b.ts"),
                "-c",
                str(project / "msgscan.yaml"),
            ],
        )

        assert result.exit_code == 0
        assert "Skipping" in result.stderr
        assert [m["text"] for m in json.loads(result.stdout)] == ["Pear"]
