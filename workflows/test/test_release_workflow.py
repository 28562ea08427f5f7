"""Checks on the tag-triggered release workflow."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml


def _workflow() -> dict[Any, Any]:
    path = Path(__file__).resolve().parents[2] / ".github" / "workflows" / "release.yml"
    if not path.exists():
        pytest.skip("release workflow not present (installed package)")
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def _step(steps: list[dict[str, Any]], name: str) -> dict[str, Any]:
    return next(s for s in steps if s.get("name") == name)


def test_triggered_by_any_tag() -> None:
    # PyYAML reads the bare "on" key as True
    workflow = _workflow()
    trigger = workflow.get("on", workflow.get(True))
    assert trigger == {"push": {"tags": ["*"]}}


def test_release_is_prerelease_named_after_tag() -> None:
    steps = _workflow()["jobs"]["release"]["steps"]
    create = _step(steps, "Create Release")

    assert create["with"]["draft"] is False
    assert create["with"]["prerelease"] is True
    assert create["with"]["release_name"] == "Release ${{ github.ref }}"
    assert create["env"]["GITHUB_TOKEN"] == "${{ secrets.GITHUB_TOKEN }}"


def test_uploads_single_linux_asset() -> None:
    steps = _workflow()["jobs"]["release"]["steps"]
    uploads = [s for s in steps if str(s.get("uses", "")).startswith("actions/upload-release-asset")]

    assert len(uploads) == 1
    params = uploads[0]["with"]
    assert params["asset_name"] == "workflows-linux-x64"
    assert params["asset_content_type"] == "application/octet-stream"
    assert params["asset_path"] == "./dist/workflows"


def test_build_entry_point_is_outside_the_package() -> None:
    """Running a script inside workflows/ would shadow the stdlib platform module."""
    root = Path(__file__).resolve().parents[2]
    build = _step(_workflow()["jobs"]["release"]["steps"], "Build executable")
    command = next(line for line in build["run"].splitlines() if line.startswith("pyinstaller"))
    entry = command.split()[-1]

    assert (root / entry).is_file()
    assert not entry.startswith("workflows/")
