"""File I/O operations for rendered outputs."""

from __future__ import annotations

import datetime as dt
import logging
import os
import tempfile
import zipfile
from io import BytesIO
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Sequence

from ..core.models import RenderedOutput

logger = logging.getLogger(__name__)


class DeliveryError(RuntimeError):
    """Raised when rendered outputs cannot be delivered."""


def ensure_parent(path: Path) -> None:
    """Ensure parent directories exist for the given path.

    Args:
        path: Path whose parent directories should be created
    """
    path.parent.mkdir(parents=True, exist_ok=True)


def atomic_write_bytes(path: Path, data: bytes, mode: int = 0o644) -> None:
    """Write bytes to a file atomically using a temporary file.

    Args:
        path: Destination file path
        data: Content to write
        mode: File permissions (octal)
    """
    ensure_parent(path)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, path)
        os.chmod(path, mode)
    finally:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)


def atomic_write_text(path: Path, text: str, mode: int = 0o644) -> None:
    """Write UTF-8 text to a file atomically."""
    atomic_write_bytes(path, text.encode("utf-8"), mode=mode)


def archive_name(template_name: str | None, now: dt.datetime | None = None) -> str:
    """Name of the archive bundling several outputs."""
    if template_name:
        return f"{template_name}_outputs.zip"
    moment = now or dt.datetime.now(dt.timezone.utc)
    return f"outputs_{moment.strftime('%Y-%m-%dT%H-%M-%S')}.zip"


def check_relative_name(filename: str) -> str:
    """Return ``filename`` if it is a non-empty path relative to its destination.

    Raises:
        DeliveryError: for empty names, absolute paths, drive letters or ``..``
    """
    if not filename or not filename.strip():
        raise DeliveryError("Output filename is empty")

    posix = PurePosixPath(filename.replace("\\", "/"))
    if posix.is_absolute() or PureWindowsPath(filename).drive or ".." in posix.parts:
        raise DeliveryError(f"Output filename must stay inside the destination: {filename!r}")
    return filename


def resolve_inside(dest_root: Path, filename: str) -> Path:
    """Join ``filename`` to ``dest_root``, refusing paths that land outside it."""
    check_relative_name(filename)
    root = dest_root.resolve()
    path = (root / filename).resolve()
    if path == root or not path.is_relative_to(root):
        raise DeliveryError(f"Output filename must stay inside the destination: {filename!r}")
    return path


def build_archive(outputs: Sequence[RenderedOutput]) -> bytes:
    """Bundle outputs into an in-memory ZIP, one member per resolved filename.

    Raises:
        DeliveryError: when a filename is unsafe or used by two outputs
    """
    seen: dict[str, str] = {}
    for output in outputs:
        member = check_relative_name(output.filename)
        if member in seen:
            raise DeliveryError(
                f'Outputs "{seen[member]}" and "{output.name}" both resolve to {member!r}'
            )
        seen[member] = output.name

    buffer = BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for output in outputs:
            zf.writestr(output.filename, output.content)
    return buffer.getvalue()


def deliver_outputs(
    outputs: Sequence[RenderedOutput],
    dest_root: Path,
    template_name: str | None = None,
    file_mode: int = 0o644,
) -> Path:
    """Deliver rendered outputs as one file or one archive.

    Args:
        outputs: Rendered outputs to deliver
        dest_root: Directory receiving the file
        template_name: Used to name the archive when there are several outputs
        file_mode: File permissions

    Returns:
        Path of the written file or archive

    Raises:
        DeliveryError: when there is nothing to deliver or a name escapes ``dest_root``
    """
    if not outputs:
        raise DeliveryError("No outputs to download")

    if len(outputs) == 1:
        output = outputs[0]
        path = resolve_inside(dest_root, output.filename)
        atomic_write_text(path, output.content, mode=file_mode)
        logger.info(f"Wrote {output.name} → {path}")
        return path

    path = resolve_inside(dest_root, archive_name(template_name))
    atomic_write_bytes(path, build_archive(outputs), mode=file_mode)
    logger.info(f"Bundled {len(outputs)} output(s) → {path}")
    return path
