"""Tests for the command line."""

import json
from pathlib import Path

from click.testing import CliRunner

from classinput.cli import cli


def _invoke(tmp_path: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(cli, ["--config", str(tmp_path / "none.properties"), *args])


def test_scan_reports_counts(tmp_path: Path, make_class, make_archive):
    make_class(tmp_path / "A.class")
    make_archive(tmp_path / "lib.jar", {"B.class": b"b", "C.class": b"c", "d.txt": b"d"})

    result = _invoke(tmp_path, "scan", str(tmp_path), "--json-output")
    assert result.exit_code == 0, result.output
    summary = json.loads(result.output)
    assert summary["files"] == 2
    assert summary["streams"] == 3
    assert summary["skipped"] == 0
    assert summary["last_modified"] is not None


def test_scan_lists_streams(tmp_path: Path, make_class, make_archive):
    make_class(tmp_path / "A.class")
    jar = make_archive(tmp_path / "lib.jar", {"org/B.class": b"b"})

    result = _invoke(tmp_path, "scan", str(tmp_path), "--list")
    assert result.exit_code == 0, result.output
    assert f"{jar.resolve()}!org/B.class" in result.output
    assert "Class streams: 2" in result.output


def test_scan_empty_directory(tmp_path: Path):
    (tmp_path / "notes.txt").write_text("nothing to see")
    result = _invoke(tmp_path, "scan", str(tmp_path))
    assert result.exit_code == 0, result.output
    assert "Files in input data set: 0" in result.output
    assert "Last modified: -" in result.output


def test_scan_uses_configured_directory(tmp_path: Path, make_class):
    builds = tmp_path / "builds"
    make_class(builds / "deep" / "A.class")
    props = tmp_path / "app.properties"
    props.write_text(f"buildsDirectory={builds}\nrecursive=false\n")

    result = CliRunner().invoke(cli, ["--config", str(props), "scan", "-j"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["files"] == 0

    result = CliRunner().invoke(cli, ["--config", str(props), "scan", "-j", "--recursive"])
    assert json.loads(result.output)["files"] == 1


def test_history_command(tmp_path: Path, make_archive):
    make_archive(tmp_path / "v1.jar", {"A.class": b"a"})
    log = tmp_path / "versions.txt"
    log.write_text("%name = Demo app\n1, 1.0, v1.jar\n2, 2.0, v2.jar\n")

    result = _invoke(tmp_path, "history", str(log), "-j")
    assert result.exit_code == 0, result.output
    report = json.loads(result.output)
    assert report["name"] == "Demo"
    first, second = report["versions"]
    assert first["streams"] == 1
    assert "error" in second


def test_classify_command(tmp_path: Path):
    result = _invoke(tmp_path, "classify", "Outer$Inner.class", "Plain.class", "lib.jar", "x.txt")
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines == [
        "Outer$Inner.class: inner class (outer: Outer)",
        "Plain.class: class",
        "lib.jar: archive",
        "x.txt: ignored",
    ]
