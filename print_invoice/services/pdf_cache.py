from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, Optional

from print_invoice.config import PrintInvoiceConfig
from print_invoice.errors import classify_os_error
from print_invoice.renderer_interface import AssetResolver, DocumentRenderer
from print_invoice.services.assets import DirectoryAssetResolver, resolve_logo_path
from print_invoice.services.storage import pdf_file_path

logger = logging.getLogger(__name__)

RenderFn = Callable[[str, Any], bytes]

_LOCK_STRIPES = 64
_path_locks = [threading.Lock() for _ in range(_LOCK_STRIPES)]


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


_FILE_MODE = 0o666 & ~_current_umask()


def _lock_for(path: Path) -> threading.Lock:
    # Fixed pool: one path always maps to the same lock, unrelated paths may share one.
    return _path_locks[hash(str(path)) % _LOCK_STRIPES]


def _write_atomic(path: Path, payload: bytes) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        os.chmod(tmp_name, _FILE_MODE)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def get_document(
    template_name: str,
    order: Any,
    render_fn: RenderFn,
    config: PrintInvoiceConfig,
) -> bytes:
    """Return the PDF for ``order`` rendered with ``template_name``.

    With ``store_pdf`` off this is just ``render_fn(template_name, order)``.
    Otherwise the document is rendered once, stored under
    ``{storage_path}/{templates}/{filename}.pdf`` and served from disk on
    every later call. Stored files are never invalidated, even when the order
    changes afterwards.
    """
    if not config.store_pdf:
        return render_fn(template_name, order)

    path = pdf_file_path(config, template_name, order)
    with _lock_for(path):
        if not path.exists():
            # A failing render propagates and leaves no file behind.
            payload = render_fn(template_name, order)
            try:
                _write_atomic(path, bytes(payload))
            except OSError as exc:
                raise classify_os_error("write", path, exc) from exc
            logger.info(
                "pdf_cache.stored",
                extra={"template": template_name, "path": str(path), "size": len(payload)},
            )
        else:
            logger.debug("pdf_cache.hit", extra={"template": template_name, "path": str(path)})

        try:
            return path.read_bytes()
        except OSError as exc:
            raise classify_os_error("read", path, exc) from exc


def pdf_file(
    order: Any,
    template_name: str,
    config: PrintInvoiceConfig,
    renderer: DocumentRenderer,
    resolver: Optional[AssetResolver] = None,
) -> bytes:
    resolver = resolver or DirectoryAssetResolver(config.resolved_asset_paths)

    def render(name: str, entity: Any) -> bytes:
        logo = resolve_logo_path(config.logo_path, resolver, root=config.root)
        return renderer.render(name, entity, logo)

    return get_document(template_name, order, render, config)
