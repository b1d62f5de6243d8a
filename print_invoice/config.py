from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from reportlab.lib.pagesizes import A4, A5, LEGAL, LETTER, landscape, portrait

from print_invoice.env import load_env


_PAGE_SIZES = {
    "A4": A4,
    "A5": A5,
    "LETTER": LETTER,
    "LEGAL": LEGAL,
}

_ENV_PREFIX = "PRINT_INVOICE_"
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _env_bool(value: str | None, default: bool = False) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class PrintInvoiceConfig(BaseModel):
    """Settings for numbering, caching and rendering of order documents.

    Built once by the host and handed to every operation; nothing in this
    package reads process-wide settings on its own.
    """

    use_sequential_number: bool = False
    next_number: int = Field(default=1, ge=1)
    invoice_number_format: str = "{seq}"

    store_pdf: bool = False
    storage_path: str = "tmp/pdf_prints"
    root: Path = Field(default_factory=Path.cwd)

    logo_path: Optional[str] = None
    asset_paths: list[Path] = Field(default_factory=list)
    logo_scale: int = Field(default=50, gt=0, le=100)

    font_face: str = "Helvetica"
    font_size: int = Field(default=9, gt=0)
    page_size: str = "LETTER"
    page_layout: str = "portrait"
    use_footer: bool = False
    footer_left: str = ""
    footer_right: str = ""
    use_page_numbers: bool = False

    print_buttons: str = "invoice"

    log_level: str = "INFO"
    log_dir: Optional[str] = "storage/logs"
    log_max_bytes: int = Field(default=5 * 1024 * 1024, gt=0)
    log_backup_count: int = Field(default=5, ge=0)

    @field_validator("page_size")
    @classmethod
    def _check_page_size(cls, value: str) -> str:
        normalized = (value or "").strip().upper()
        if normalized not in _PAGE_SIZES:
            raise ValueError(f"Unsupported page size: {value!r}")
        return normalized

    @field_validator("page_layout")
    @classmethod
    def _check_page_layout(cls, value: str) -> str:
        normalized = (value or "").strip().lower()
        if normalized not in {"portrait", "landscape"}:
            raise ValueError(f"Unsupported page layout: {value!r}")
        return normalized

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = (value or "").strip().upper()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {value!r}")
        return normalized

    @property
    def storage_root(self) -> Path:
        return self.root / self.storage_path

    @property
    def resolved_asset_paths(self) -> list[Path]:
        return [path if path.is_absolute() else self.root / path for path in self.asset_paths]

    @property
    def log_path(self) -> Optional[Path]:
        if not self.log_dir:
            return None
        return self.root / self.log_dir

    @property
    def pagesize(self) -> tuple[float, float]:
        size = _PAGE_SIZES[self.page_size]
        if self.page_layout == "landscape":
            return landscape(size)
        return portrait(size)

    @property
    def enabled_templates(self) -> list[str]:
        return [name.strip() for name in self.print_buttons.split(",") if name.strip()]

    @classmethod
    def from_env(cls, **overrides) -> "PrintInvoiceConfig":
        load_env()

        def env(name: str) -> str | None:
            return os.getenv(f"{_ENV_PREFIX}{name}")

        values: dict = {
            "use_sequential_number": _env_bool(env("USE_SEQUENTIAL_NUMBER")),
            "store_pdf": _env_bool(env("STORE_PDF")),
            "use_footer": _env_bool(env("USE_FOOTER")),
            "use_page_numbers": _env_bool(env("USE_PAGE_NUMBERS")),
        }
        for key in (
            "next_number",
            "invoice_number_format",
            "storage_path",
            "root",
            "logo_path",
            "logo_scale",
            "font_face",
            "font_size",
            "page_size",
            "page_layout",
            "footer_left",
            "footer_right",
            "print_buttons",
            "log_level",
            "log_dir",
        ):
            raw = env(key.upper())
            if raw is not None and raw != "":
                values[key] = raw
        asset_paths = env("ASSET_PATHS")
        if asset_paths:
            values["asset_paths"] = [Path(p) for p in asset_paths.split(os.pathsep) if p]
        if os.getenv("PRINT_INVOICE_DEBUG") == "1":
            values["log_level"] = "DEBUG"
        values.update(overrides)
        return cls(**values)
