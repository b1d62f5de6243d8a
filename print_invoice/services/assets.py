from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from print_invoice.renderer_interface import AssetResolver

logger = logging.getLogger(__name__)


class DirectoryAssetResolver:
    """Looks an asset name up in a list of asset directories, first hit wins."""

    def __init__(self, search_paths: Iterable[Path | str]) -> None:
        self._search_paths = [Path(p) for p in search_paths]

    def find(self, name: str) -> Optional[Path]:
        relative = Path(name)
        if relative.is_absolute():
            return None
        for base in self._search_paths:
            candidate = base / relative
            if candidate.is_file():
                return candidate
        return None


def resolve_logo_path(
    configured_path: Optional[str],
    resolver: AssetResolver,
    root: Optional[Path] = None,
) -> Optional[Path]:
    """Absolute logo path for the renderer, or ``None``.

    A missing logo only degrades the document, so it is logged and skipped
    instead of failing the render.
    """
    if not configured_path or not str(configured_path).strip():
        return None

    configured_path = str(configured_path).strip()
    logo_path = resolver.find(configured_path)
    if logo_path is None:
        logo_path = Path(configured_path)
        if not logo_path.is_absolute() and root is not None:
            logo_path = root / logo_path

    if not logo_path.exists():
        logger.warning(
            "assets.logo_missing",
            extra={"configured_path": configured_path, "logo_path": str(logo_path)},
        )
        return None

    return logo_path.resolve()
