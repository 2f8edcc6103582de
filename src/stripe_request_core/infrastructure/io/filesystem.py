"""Filesystem implementations for infrastructure."""

from __future__ import annotations

from pathlib import Path
from typing import override

from ...protocols import FileSystem


class LocalFileSystem(FileSystem):
    """Local filesystem implementation."""

    @override
    def exists(self, path: Path) -> bool:
        return path.exists()

    @override
    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")
