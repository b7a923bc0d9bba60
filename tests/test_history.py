"""Tests for history file parsing."""

from pathlib import Path

import pytest

from classinput.errors import NotFoundError
from classinput.history import parse_history_file

HISTORY = """\
# Example history
@ https://example.org/project
%name = Example Project
%license = Apache
>includePackage: org.example
>ExcludePackage: org.example.test
2, 1.1.0, example-1.1.0
1, 1.0.0, example-1.0.0.jar
this line is broken
x, 0.9, bad-rsn.jar
"""


def test_parse_history(tmp_path: Path):
    log = tmp_path / "versions.txt"
    log.write_text(HISTORY)

    history = parse_history_file(log)
    assert history.metadata == {"name": "Example Project", "license": "Apache"}
    assert history.short_name == "Example"
    assert history.include_packages == {"org.example"}
    assert history.exclude_packages == {"org.example.test"}
    assert [(v.rsn, v.version_id) for v in history.versions] == [(1, "1.0.0"), (2, "1.1.0")]
    assert history.versions[0].path == tmp_path / "example-1.0.0.jar"


def test_short_name_defaults_to_file_stem(tmp_path: Path):
    log = tmp_path / "versions.txt"
    log.write_text("1, 1.0, a.jar\n")
    assert parse_history_file(log).short_name == "versions"


def test_version_data_sets(tmp_path: Path, make_class, make_archive):
    make_archive(tmp_path / "example-1.0.0.jar", {"A.class": b"a"})
    make_class(tmp_path / "example-1.1.0" / "A.class")
    make_class(tmp_path / "example-1.1.0" / "B.class")
    make_class(tmp_path / "example-1.1.0" / "nested" / "C.class")
    log = tmp_path / "versions.txt"
    log.write_text(HISTORY)

    v1, v2 = parse_history_file(log).versions
    assert v1.data_set().size() == 1
    # builds are read flat
    assert v2.data_set().size() == 2


def test_missing_history(tmp_path: Path):
    with pytest.raises(NotFoundError):
        parse_history_file(tmp_path / "nope.txt")


def test_package_filters_are_passed_through(tmp_path: Path, make_archive):
    make_archive(tmp_path / "example-1.0.0.jar", {
        "org/example/A.class": b"a",
        "org/example/test/ATest.class": b"t",
        "com/other/C.class": b"c",
    })
    log = tmp_path / "versions.txt"
    log.write_text(HISTORY)

    history = parse_history_file(log)
    v1 = history.versions[0]
    with v1.data_set().iterate() as cursor:
        names = [stream.name for stream in cursor]

    # a class's package is only known from its bytecode, so nothing is dropped here
    assert names == [
        "org/example/A.class",
        "org/example/test/ATest.class",
        "com/other/C.class",
    ]
    assert history.exclude_packages == {"org.example.test"}
