from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from beam_courier.ui.main import (
    LEVEL_ENV_VAR,
    SOLUTION_ENV_VAR,
    UIDirectories,
    bootstrap_directories,
    main,
    resolve_directories,
)


def test_resolve_directories_returns_package_defaults():
    directories = resolve_directories()

    assert isinstance(directories, UIDirectories)
    assert directories.level_root.exists()
    assert directories.solution_root.exists()
    assert (directories.level_root / "level_intro.json").exists()


def test_resolve_directories_honours_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    level_dir = tmp_path / "levels"
    solution_dir = tmp_path / "solutions"
    level_dir.mkdir()
    solution_dir.mkdir()

    monkeypatch.setenv(LEVEL_ENV_VAR, str(level_dir))
    monkeypatch.setenv(SOLUTION_ENV_VAR, str(solution_dir))

    directories = resolve_directories()

    assert directories.level_root == level_dir
    assert directories.solution_root == solution_dir


def test_resolve_directories_errors_on_missing_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv(LEVEL_ENV_VAR, str(tmp_path / "missing_levels"))

    with pytest.raises(FileNotFoundError, match="missing_levels"):
        resolve_directories()

    directories = resolve_directories(check_exists=False)
    assert directories.level_root == tmp_path / "missing_levels"


def test_bootstrap_prints_message(capsys: pytest.CaptureFixture[str]):
    directories = bootstrap_directories()
    output = capsys.readouterr().out

    assert "Beam Courier UI bootstrap" in output
    assert str(directories.level_root) in output
    assert str(directories.solution_root) in output


def test_cli_info_exits_cleanly(capsys: pytest.CaptureFixture[str]):
    assert main(["--info"]) == 0
    assert "bootstrap" in capsys.readouterr().out


def test_cli_lists_levels(capsys: pytest.CaptureFixture[str]):
    exit_code = main(["--list-levels"])
    output = capsys.readouterr().out

    assert exit_code == 0
    assert "Available levels" in output
    assert "level_intro: First Fetch [Easy, 5x3]" in output


def test_cli_lists_levels_from_custom_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    source = resolve_directories().level_root / "level_regrip.json"
    shutil.copy(source, tmp_path / "only_level.json")
    monkeypatch.setenv(LEVEL_ENV_VAR, str(tmp_path))

    assert main(["--list-levels"]) == 0
    output = capsys.readouterr().out
    assert "only_level" in output
    assert "level_intro" not in output


def test_cli_reports_missing_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
):
    monkeypatch.setenv(SOLUTION_ENV_VAR, str(tmp_path / "nowhere"))

    assert main(["--list-levels"]) == 1
    assert "nowhere" in capsys.readouterr().err


def test_cli_rejects_unknown_level(capsys: pytest.CaptureFixture[str]):
    assert main(["--level", "no_such_level", "--list-levels"]) == 2
    assert "no_such_level" in capsys.readouterr().err
