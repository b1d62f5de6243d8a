from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Protocol


class DocumentRenderer(Protocol):
    def render(self, template_name: str, order: Any, logo_path: Optional[Path] = None) -> bytes:
        ...


class AssetResolver(Protocol):
    def find(self, name: str) -> Optional[Path]:
        ...


class SequenceCounter(Protocol):
    def next(self) -> int:
        ...
