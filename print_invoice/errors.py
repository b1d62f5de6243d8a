from __future__ import annotations

import errno
from pathlib import Path


class PrintInvoiceError(Exception):
    pass


class UnknownTemplateError(PrintInvoiceError):
    def __init__(self, template_name: str) -> None:
        super().__init__(f"Unknown document template: {template_name!r}")
        self.template_name = template_name


class StorageError(PrintInvoiceError):
    """A filesystem operation on the document store failed."""

    def __init__(self, operation: str, path: Path | str, cause: OSError) -> None:
        super().__init__(f"{operation} failed for {path}: {cause.strerror or cause}")
        self.operation = operation
        self.path = Path(path)
        self.cause = cause


class StorageNotFound(StorageError):
    pass


class StoragePermissionDenied(StorageError):
    pass


class StorageIOFailure(StorageError):
    pass


def classify_os_error(operation: str, path: Path | str, exc: OSError) -> StorageError:
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return StorageNotFound(operation, path, exc)
    if isinstance(exc, PermissionError) or exc.errno in (errno.EACCES, errno.EPERM):
        return StoragePermissionDenied(operation, path, exc)
    return StorageIOFailure(operation, path, exc)
