from __future__ import annotations

import logging
from pathlib import Path

import pytest

from print_invoice.services.assets import DirectoryAssetResolver, resolve_logo_path


@pytest.mark.parametrize("configured", [None, "", "   "])
def test_unconfigured_logo_is_none(configured) -> None:
    assert resolve_logo_path(configured, DirectoryAssetResolver([])) is None


def test_logo_found_through_asset_directories(tmp_path: Path) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    (second / "logo").mkdir(parents=True)
    first.mkdir()
    logo = second / "logo" / "shop.png"
    logo.write_bytes(b"png")

    resolver = DirectoryAssetResolver([first, second])

    assert resolve_logo_path("logo/shop.png", resolver) == logo.resolve()


def test_logo_falls_back_to_literal_path(tmp_path: Path) -> None:
    logo = tmp_path / "public" / "logo.png"
    logo.parent.mkdir()
    logo.write_bytes(b"png")

    resolver = DirectoryAssetResolver([tmp_path / "assets"])

    assert resolve_logo_path(str(logo), resolver) == logo.resolve()
    assert resolve_logo_path("public/logo.png", resolver, root=tmp_path) == logo.resolve()


def test_missing_logo_warns_and_returns_none(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    resolver = DirectoryAssetResolver([tmp_path])

    with caplog.at_level(logging.WARNING, logger="print_invoice.services.assets"):
        result = resolve_logo_path("missing/logo.png", resolver, root=tmp_path)

    assert result is None
    assert any(record.getMessage() == "assets.logo_missing" for record in caplog.records)
