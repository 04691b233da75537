"""Golden-file checks: compiled fixtures must match the expected artifacts byte for byte."""

from __future__ import annotations

from pathlib import Path

from pmlc.application.build_service import BuildService, discover_sources
from pmlc.application.config_models import BuildSettings
from pmlc.application.markdown_checker import check_directory
from pmlc.application.transformer import transform


def _golden_pairs(fixtures_dir: Path) -> list[tuple[Path, Path]]:
    sources = discover_sources(fixtures_dir / "prompts")
    return [(s, fixtures_dir / "expected" / f"{s.stem}.md") for s in sources]


def test_every_fixture_has_an_expected_artifact(fixtures_dir: Path) -> None:
    pairs = _golden_pairs(fixtures_dir)

    assert pairs
    for source, expected in pairs:
        assert expected.is_file(), f"No expected artifact for {source.name}"


def test_transform_matches_golden(fixtures_dir: Path) -> None:
    for source, expected in _golden_pairs(fixtures_dir):
        actual = transform(source)
        assert actual == expected.read_bytes().decode("utf-8"), source.name


def test_build_writes_golden_artifacts_that_pass_checks(
    fixtures_dir: Path, tmp_path: Path
) -> None:
    settings = BuildSettings(source_dir=fixtures_dir / "prompts", output_dir=tmp_path / "out")

    report = BuildService(settings).build()

    assert report.exit_code == 0, [r.error for r in report.failures]
    for result in report.results:
        expected = fixtures_dir / "expected" / result.output.name
        assert result.output.read_bytes() == expected.read_bytes()

    files, issues = check_directory(tmp_path / "out")
    assert len(files) == len(report.results)
    assert issues == []


def test_repeated_builds_are_byte_identical(fixtures_dir: Path, tmp_path: Path) -> None:
    outputs = []
    for i in range(2):
        settings = BuildSettings(
            source_dir=fixtures_dir / "prompts", output_dir=tmp_path / f"out{i}"
        )
        report = BuildService(settings).build()
        outputs.append({r.output.name: r.output.read_bytes() for r in report.results})

    assert all(o == outputs[0] for o in outputs)
