"""Shared fixtures keeping every test isolated from the host configuration.

The resolver reads ``DN_*`` override variables and falls back to
``/etc/getconfig``. Tests point the base directory at a temporary sandbox and
reset the process-wide instance so no state leaks between cases.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from lib_getconfig import reset_default_config
from tests.support import ConfigSandbox, create_sandbox

OVERRIDE_VARIABLES = ("DN_INI_FILE", "DN_ETC_DIR", "DN_INI_DIR")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Remove discovery overrides and point the base directory at an empty directory."""

    for name in OVERRIDE_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DN_ETC_DIR", str(tmp_path / "empty-etc"))
    reset_default_config()
    yield
    reset_default_config()


@pytest.fixture()
def sandbox(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigSandbox:
    """Provide a base directory wired through ``DN_ETC_DIR``."""

    created = create_sandbox(tmp_path)
    monkeypatch.setenv("DN_ETC_DIR", str(created.etc_dir))
    return created
