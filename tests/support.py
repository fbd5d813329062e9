"""Sandbox helper shared by the resolver and CLI suites."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class ConfigSandbox:
    """Temporary base directory with a ``config.d`` directory beneath it."""

    etc_dir: Path
    ini_dir: Path

    def write(self, relative: str, content: str) -> Path:
        """Write *content* below the base directory and return the path."""

        path = self.etc_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path


def create_sandbox(root: Path) -> ConfigSandbox:
    """Create ``<root>/etc/config.d`` and return the sandbox describing it."""

    etc_dir = root / "etc"
    ini_dir = etc_dir / "config.d"
    ini_dir.mkdir(parents=True, exist_ok=True)
    return ConfigSandbox(etc_dir=etc_dir, ini_dir=ini_dir)
