# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for kind detection, entry points and manifest inspection."""

from __future__ import annotations

from pathlib import Path

import pytest

from hoist.detection import (
    DEFAULT_RULES,
    Detector,
    detect_kind,
    detect_package_manager,
    go_module_name,
    parse_go_module,
    resolve_entry_point,
)
from hoist.models import ProjectKind
from hoist.probe import FilesystemProbe, LocalProbe


class FakeProbe:
    """In-memory probe; a ``None`` value marks an entry that exists but cannot be read."""

    def __init__(self, files: dict[str, str | None], root: Path = Path("/fake/project")) -> None:
        self._files = files
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def exists(self, relative: str) -> bool:
        return relative in self._files

    def read_text(self, relative: str) -> str | None:
        return self._files.get(relative)


def _touch(root: Path, *names: str, content: str = "") -> None:
    for name in names:
        target = root / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


def test_fake_probe_satisfies_protocol() -> None:
    assert isinstance(FakeProbe({}), FilesystemProbe)
    assert isinstance(LocalProbe(Path(".")), FilesystemProbe)


@pytest.mark.parametrize(
    ("files", "expected"),
    [
        ({"pyproject.toml": "[project]\nname='demo'\n\n[tool.uv]\npackage = true\n"}, ProjectKind.MANAGED_PYTHON),
        ({"pyproject.toml": "[project]\nname='demo'\n", "uv.lock": ""}, ProjectKind.MANAGED_PYTHON),
        ({"bin/activate": ""}, ProjectKind.VENV_PYTHON),
        ({"go.mod": "module example.com/tool\n"}, ProjectKind.GO),
        ({"Cargo.toml": "[package]\nname = 'demo'\n"}, ProjectKind.RUST),
        ({"package.json": "{}", "tsconfig.json": "{}"}, ProjectKind.TYPESCRIPT),
        ({"package.json": "{}"}, ProjectKind.JAVASCRIPT),
        ({"pyproject.toml": "[project]\nname='demo'\n"}, ProjectKind.GENERIC_PYTHON),
    ],
)
def test_detect_kind_matches_markers(files: dict[str, str | None], expected: ProjectKind) -> None:
    assert detect_kind(FakeProbe(files)) is expected


def test_rule_order_decides_between_overlapping_markers() -> None:
    both = FakeProbe({"pyproject.toml": "[tool.uv]\n", "bin/activate": "", "go.mod": "module x\n"})
    assert detect_kind(both) is ProjectKind.MANAGED_PYTHON

    go_and_node = FakeProbe({"go.mod": "module x\n", "package.json": "{}"})
    assert detect_kind(go_and_node) is ProjectKind.GO

    venv_with_pyproject = FakeProbe({"pyproject.toml": "[project]\n", "bin/activate": ""})
    assert detect_kind(venv_with_pyproject) is ProjectKind.VENV_PYTHON


def test_uv_lock_without_pyproject_is_not_managed() -> None:
    assert detect_kind(FakeProbe({"uv.lock": ""})) is ProjectKind.GENERIC_PYTHON
    assert detect_kind(FakeProbe({"uv.lock": ""}), fallback=ProjectKind.UNKNOWN) is ProjectKind.UNKNOWN


def test_unreadable_pyproject_counts_as_not_declaring_uv() -> None:
    probe = FakeProbe({"pyproject.toml": None})
    assert detect_kind(probe) is ProjectKind.GENERIC_PYTHON


def test_local_probe_treats_unreadable_marker_as_absent(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").mkdir()
    probe = LocalProbe(tmp_path)

    assert probe.exists("pyproject.toml")
    assert probe.read_text("pyproject.toml") is None
    assert detect_kind(probe) is ProjectKind.GENERIC_PYTHON


def test_local_probe_ignores_undecodable_content(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_bytes(b"\xff\xfe[tool.uv]")
    assert LocalProbe(tmp_path).read_text("pyproject.toml") is None


def test_empty_directory_uses_fallback(tmp_path: Path) -> None:
    assert Detector().detect(tmp_path) is ProjectKind.GENERIC_PYTHON
    assert Detector(fallback=ProjectKind.UNKNOWN).detect(tmp_path) is ProjectKind.UNKNOWN


def test_detection_is_idempotent(tmp_path: Path) -> None:
    _touch(tmp_path, "package.json", "tsconfig.json", "pnpm-lock.yaml")
    detector = Detector()

    assert detector.describe(tmp_path) == detector.describe(tmp_path)


def test_default_rules_are_ordered() -> None:
    assert [rule.kind for rule in DEFAULT_RULES] == [
        ProjectKind.MANAGED_PYTHON,
        ProjectKind.VENV_PYTHON,
        ProjectKind.GO,
        ProjectKind.RUST,
        ProjectKind.TYPESCRIPT,
        ProjectKind.JAVASCRIPT,
        ProjectKind.GENERIC_PYTHON,
    ]


@pytest.mark.parametrize(
    ("files", "kind", "expected"),
    [
        ({"main.py": ""}, ProjectKind.GENERIC_PYTHON, "main.py"),
        ({"main.py": "", "app.py": ""}, ProjectKind.VENV_PYTHON, "app.py"),
        ({"__main__.py": ""}, ProjectKind.MANAGED_PYTHON, "__main__.py"),
        ({}, ProjectKind.GENERIC_PYTHON, "app.py"),
        ({"cmd/main.go": ""}, ProjectKind.GO, "cmd/main.go"),
        ({"main.go": "", "cmd/main.go": ""}, ProjectKind.GO, "main.go"),
        ({}, ProjectKind.GO, "."),
        ({"main.py": ""}, ProjectKind.RUST, "."),
        ({}, ProjectKind.JAVASCRIPT, "."),
    ],
)
def test_resolve_entry_point(files: dict[str, str | None], kind: ProjectKind, expected: str) -> None:
    assert resolve_entry_point(FakeProbe(files), kind) == expected


@pytest.mark.parametrize(
    ("files", "expected"),
    [
        ({"yarn.lock": ""}, "yarn"),
        ({"pnpm-lock.yaml": ""}, "pnpm"),
        ({"bun.lockb": ""}, "bun"),
        ({"bun.lock": ""}, "bun"),
        ({"yarn.lock": "", "pnpm-lock.yaml": ""}, "yarn"),
        ({}, "npm"),
    ],
)
def test_detect_package_manager(files: dict[str, str | None], expected: str) -> None:
    assert detect_package_manager(FakeProbe(files)) == expected


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("module example.com/foo\n\ngo 1.22\n", "foo"),
        ("// header\nmodule github.com/acme/widget/v2\n", "widget"),
        ('module "example.com/quoted"\n', "quoted"),
        ("module tool // trailing comment\n", "tool"),
        ("module v2\n", "v2"),
        ("go 1.22\n", None),
    ],
)
def test_parse_go_module(content: str, expected: str | None) -> None:
    assert parse_go_module(content) == expected


def test_go_module_name_falls_back_to_directory_name() -> None:
    probe = FakeProbe({"go.mod": "go 1.22\n"}, root=Path("/work/service"))
    assert go_module_name(probe) == "service"


def test_describe_records_manifest_facts(tmp_path: Path) -> None:
    go_dir = tmp_path / "tool"
    _touch(go_dir, "go.mod", content="module example.com/foo\n")
    _touch(go_dir, "cmd/main.go")
    js_dir = tmp_path / "web"
    _touch(js_dir, "package.json", "yarn.lock")

    detector = Detector()
    go_descriptor = detector.describe(go_dir)
    js_descriptor = detector.describe(js_dir)

    assert go_descriptor.kind is ProjectKind.GO
    assert go_descriptor.entry_point == "cmd/main.go"
    assert go_descriptor.metadata == {"module": "foo"}
    assert go_descriptor.package_manager is None
    assert js_descriptor.kind is ProjectKind.JAVASCRIPT
    assert js_descriptor.package_manager == "yarn"
    assert js_descriptor.entry_point == "."
