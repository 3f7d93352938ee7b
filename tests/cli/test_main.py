"""Tests for the :mod:`mdcomponents.__main__` entrypoint."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from mdcomponents.__main__ import main


def test_main_invokes_cli(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    workspace = tmp_path / "workspace"

    monkeypatch.setenv("MDCOMPONENTS_WORKSPACE", str(workspace))
    monkeypatch.setenv("MDCOMPONENTS_LOG_LEVEL", "warning")
    monkeypatch.setattr(sys, "argv", ["mdcomponents", "init"])

    configured: dict[str, object] = {}

    def fake_configure_logging(
        *,
        level: str,
        log_dir: Path | None = None,
        debug: bool = False,
        console=None,
    ) -> Path | None:
        configured["level"] = level
        configured["log_dir"] = log_dir
        return None

    monkeypatch.setattr("mdcomponents.cli.configure_logging", fake_configure_logging)

    with pytest.raises(SystemExit) as exc:
        main()

    assert exc.value.code == 0

    assert workspace.exists()
    assert configured["level"] == "WARNING"
    assert configured["log_dir"] == workspace.resolve() / "logs"
