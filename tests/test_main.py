from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from resource_aggregator.main import main


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.js").write_text("var a=1")
    (tmp_path / "b.js").write_text("var b=2")
    return tmp_path


def test_main_aggregates_and_prints_result(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["build/all.js", "a.js", "b.js", "--delimiters"])

    assert exit_code == 0
    output = workdir / "build" / "all.js"
    assert output.read_text() == "var a=1;var b=2"
    result = json.loads(capsys.readouterr().out)
    assert result["is_success"] is True
    assert result["output_files"] == [str(output.resolve())]


def test_main_removes_included_files(workdir: Path) -> None:
    exit_code = main(["all.js", "a.js", "b.js", "--remove-included"])

    assert exit_code == 0
    assert not (workdir / "a.js").exists()
    assert not (workdir / "b.js").exists()
    assert (workdir / "all.js").read_text() == "var a=1var b=2"


def test_main_reports_failure(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main(["all.js", "a.js", "missing.js"])

    assert exit_code == 1
    result = json.loads(capsys.readouterr().out)
    assert result["is_success"] is False
    assert result["failed_at"] == "aggregate"


def test_main_requires_inputs_or_prepend(workdir: Path) -> None:
    with pytest.raises(SystemExit):
        main(["all.js"])


def test_main_prepend_only(workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (workdir / "banner.txt").write_text("/* banner */")

    exit_code = main(["all.js", "--prepend", "banner.txt"])

    assert exit_code == 0
    assert (workdir / "all.js").read_bytes().decode() == "/* banner */" + os.linesep
    result = json.loads(capsys.readouterr().out)
    assert result["sizes"]["original"] == len("/* banner */")
