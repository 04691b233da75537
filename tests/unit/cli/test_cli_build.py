"""Tests for `pmlc build`: text and JSON output, exit codes and config."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from pmlc.interface.cli.cli import cli

RULE = (
    '<content><rule id="1"><title>T</title><subtitle>S</subtitle>'
    "<description>D</description></rule></content>"
)


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_build_defaults_from_config_layout(project: Path, write_prompt) -> None:
    write_prompt("prompts/one.xml", RULE)

    result = CliRunner().invoke(cli, ["build"], prog_name="pmlc")

    assert result.exit_code == 0, result.output
    assert "OK    " in result.output
    assert "1 of 1 documents compiled." in result.output
    assert (project / "build" / "prompts" / "one.md").is_file()


def test_build_explicit_dirs_and_extension(project: Path, write_prompt) -> None:
    write_prompt("src/one.xml", RULE)

    result = CliRunner().invoke(
        cli, ["build", "src", "dist", "--extension", "mdc", "--workers", "1"], prog_name="pmlc"
    )

    assert result.exit_code == 0, result.output
    assert (project / "dist" / "one.mdc").is_file()


def test_build_failure_exits_1_and_reports_chain(project: Path, write_prompt, write_file) -> None:
    write_prompt("prompts/good.xml", RULE)
    write_file(
        "prompts/fragments/mid.xml",
        '<fragment xmlns:xi="http://www.w3.org/2001/XInclude"><xi:include href="gone.xml"/></fragment>',
    )
    write_prompt("prompts/bad.xml", "<content><xi:include href='fragments/mid.xml'/></content>")

    result = CliRunner().invoke(cli, ["build"], prog_name="pmlc")

    assert result.exit_code == 1
    assert "FAIL  " in result.output
    assert "include chain:" in result.output
    assert "1 of 2 documents compiled." in result.output
    assert (project / "build" / "prompts" / "good.md").is_file()


def test_build_only_selects_documents(project: Path, write_prompt) -> None:
    write_prompt("prompts/one.xml", RULE)
    write_prompt("prompts/two.xml", RULE)

    result = CliRunner().invoke(cli, ["build", "--only", "two"], prog_name="pmlc")

    assert result.exit_code == 0, result.output
    assert not (project / "build" / "prompts" / "one.md").exists()
    assert (project / "build" / "prompts" / "two.md").is_file()


def test_build_uses_project_config(project: Path, write_prompt, write_file) -> None:
    write_prompt("xml/one.xml", RULE)
    write_prompt("xml/two.xml", RULE)
    write_file(
        ".pml/config.yml",
        "source_dir: xml\noutput_dir: out\noutput_extension: .mdc\ninventory:\n  - one\n",
    )

    result = CliRunner().invoke(cli, ["build"], prog_name="pmlc")

    assert result.exit_code == 0, result.output
    assert (project / "out" / "one.mdc").is_file()
    assert not (project / "out" / "two.mdc").exists()


def test_build_emits_json_only(project: Path, write_prompt, write_file) -> None:
    write_prompt("prompts/good.xml", RULE)
    write_file("prompts/broken.xml", "<prompt>")

    result = CliRunner().invoke(cli, ["--json", "build"], prog_name="pmlc")

    assert result.exit_code == 1
    obj = json.loads(result.output)
    assert obj["schema_version"] == 1
    assert obj["command"] == "build"
    assert obj["exit_code"] == 1
    assert obj["succeeded"] == 1
    assert obj["failed"] == 1
    by_name = {Path(d["source"]).name: d for d in obj["documents"]}
    assert by_name["good.xml"]["ok"] is True
    assert by_name["broken.xml"]["error_type"] == "MalformedDocumentError"
    assert result.output.count("\n") == 1


def test_build_missing_source_dir_plain_text(project: Path) -> None:
    result = CliRunner().invoke(cli, ["build", "nowhere"], prog_name="pmlc")

    assert result.exit_code == 1
    assert "Source directory not found" in result.output


def test_build_missing_source_dir_json(project: Path) -> None:
    result = CliRunner().invoke(cli, ["--json", "build", "nowhere"], prog_name="pmlc")

    assert result.exit_code == 1
    obj = json.loads(result.output)
    assert obj["command"] == "build"
    assert "Source directory not found" in obj["error"]


def test_build_malformed_config_fails(project: Path, write_file) -> None:
    write_file(".pml/config.yml", "- not\n- a mapping\n")

    result = CliRunner().invoke(cli, ["build"], prog_name="pmlc")

    assert result.exit_code == 1
    assert "YAML root must be a mapping" in result.output
