# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the hoist command line interface."""

from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from hoist.cli import app


def _go_project(root: Path) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "go.mod").write_text("module example.com/tool\n", encoding="utf-8")
    return root


def _rust_project(root: Path) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / "Cargo.toml").write_text("[package]\nname = 'demo'\n", encoding="utf-8")
    return root


def test_run_dry_run_prints_commands(tmp_path: Path) -> None:
    project = _go_project(tmp_path / "tool")
    runner = CliRunner()

    result = runner.invoke(app, ["run", str(project), "--action", "build", "--dry-run", "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert "DRY RUN: go build -o /tmp/tool ." in result.output


def test_run_batch_dry_run_reports_summary(tmp_path: Path) -> None:
    go = _go_project(tmp_path / "tool")
    rust = _rust_project(tmp_path / "crate")
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["run", str(go), str(rust), "-a", "test", "--dry-run", "--jobs", "2", "--no-emoji"],
    )

    assert result.exit_code == 0, result.output
    assert "DRY RUN: go test ./..." in result.output
    assert "DRY RUN: cargo test" in result.output
    assert "2 of 2 targets succeeded" in result.output


def test_run_rejects_unavailable_action(tmp_path: Path) -> None:
    project = _rust_project(tmp_path / "crate")
    runner = CliRunner()

    result = runner.invoke(app, ["run", str(project), "--action", "tidy", "--no-emoji"])

    assert result.exit_code == 1
    assert "action 'tidy' is not available for this target" in result.output


def test_run_rejects_missing_value(tmp_path: Path) -> None:
    project = _go_project(tmp_path / "tool")
    runner = CliRunner()

    result = runner.invoke(app, ["run", str(project), "--action", "get", "--no-emoji"])

    assert result.exit_code == 1
    assert "requires a value" in result.output


def test_run_without_actions_is_a_noop(tmp_path: Path) -> None:
    project = _rust_project(tmp_path / "crate")
    runner = CliRunner()

    result = runner.invoke(app, ["run", str(project), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert "nothing selected" in result.output


def test_invalid_configuration_exits_with_error(hoist_home: Path, tmp_path: Path) -> None:
    hoist_home.mkdir(parents=True)
    (hoist_home / "config.toml").write_text("[hoist]\nmax_age_seconds = 'soon'\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["run", str(_rust_project(tmp_path / "crate")), "--no-emoji"])

    assert result.exit_code == 1
    assert "Configuration invalid" in result.output


def test_actions_lists_shared_catalog(tmp_path: Path) -> None:
    go = _go_project(tmp_path / "tool")
    rust = _rust_project(tmp_path / "crate")
    runner = CliRunner()

    result = runner.invoke(app, ["actions", str(go), str(rust), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert "Go project" in result.output
    assert "Rust project" in result.output
    assert "build" in result.output
    assert "tidy" not in result.output


def test_actions_marks_value_required_flags(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["actions", str(_go_project(tmp_path / "tool")), "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert "get=VALUE" in result.output


def test_cache_commands(tmp_path: Path) -> None:
    project = _go_project(tmp_path / "tool")
    runner = CliRunner()
    runner.invoke(app, ["actions", str(project), "--no-emoji"])

    stats = runner.invoke(app, ["cache", "stats", "--no-emoji"])
    assert stats.exit_code == 0, stats.output
    assert "1 on disk" in stats.output

    invalidated = runner.invoke(app, ["cache", "invalidate", str(project), "--no-emoji"])
    assert invalidated.exit_code == 0, invalidated.output
    assert "Invalidated cache entry" in invalidated.output
    assert "0 on disk" in runner.invoke(app, ["cache", "stats", "--no-emoji"]).output

    runner.invoke(app, ["actions", str(project), "--no-emoji"])
    cleared = runner.invoke(app, ["cache", "clear", "--no-emoji"])
    assert cleared.exit_code == 0, cleared.output
    assert "Cleared cache" in cleared.output
    assert "0 on disk" in runner.invoke(app, ["cache", "stats", "--no-emoji"]).output


def test_configured_emoji_setting_is_honoured(hoist_home: Path, tmp_path: Path) -> None:
    hoist_home.mkdir(parents=True)
    (hoist_home / "config.toml").write_text("[hoist]\nuse_emoji = false\n", encoding="utf-8")
    project = _rust_project(tmp_path / "crate")
    runner = CliRunner()

    plain = runner.invoke(app, ["actions", str(project)])
    forced = runner.invoke(app, ["actions", str(project), "--emoji"])

    assert plain.exit_code == 0, plain.output
    assert f"{project.resolve()}: Rust project" in plain.output
    assert "ℹ️" not in plain.output
    assert "ℹ️" in forced.output


def test_run_reports_phase_transitions(tmp_path: Path) -> None:
    go = _go_project(tmp_path / "tool")
    rust = _rust_project(tmp_path / "crate")
    runner = CliRunner()

    result = runner.invoke(app, ["run", str(go), str(rust), "-a", "build", "--dry-run", "--no-emoji"])

    assert result.exit_code == 0, result.output
    for target in (go.resolve(), rust.resolve()):
        for phase in ("queued", "running", "succeeded"):
            assert f"{target}: {phase}" in result.output


def test_dry_run_shows_install_step_of_two_phase_build(hoist_home: Path, tmp_path: Path) -> None:
    hoist_home.mkdir(parents=True)
    install_dir = tmp_path / "bin"
    (hoist_home / "config.toml").write_text(f'[hoist]\ninstall_dir = "{install_dir}"\n', encoding="utf-8")
    project = _go_project(tmp_path / "tool")
    runner = CliRunner()

    result = runner.invoke(app, ["run", str(project), "--action", "build", "--dry-run", "--no-emoji"])

    assert result.exit_code == 0, result.output
    assert "DRY RUN: go build -o /tmp/tool ." in result.output
    assert f"DRY RUN: install -m 755 /tmp/tool {install_dir / 'tool'}" in result.output
    assert not install_dir.exists()
