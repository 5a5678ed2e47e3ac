"""Screenshot storage for application submissions.

Files land under ``<static>/uploads/<UPLOAD_SUBDIR>/`` with a random name and
are addressed by their ``/static/...`` URL afterwards.
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path

from flask import current_app
from werkzeug.datastructures import FileStorage

from hackhub.errors import UploadError


ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
UPLOADS_DIR = 'uploads'
URL_PREFIX = '/static/'


def _extension(filename: str) -> str | None:
    if '.' not in filename:
        return None
    return filename.rsplit('.', 1)[1].lower()


def allowed_file(filename: str) -> bool:
    return _extension(filename) in ALLOWED_EXTENSIONS


def _static_root() -> Path:
    return Path(current_app.static_folder).resolve()


def _inside_static(path: Path) -> Path:
    resolved = path.resolve()
    if not resolved.is_relative_to(_static_root()):
        raise UploadError('Attempted to write outside static directory')
    return resolved


def _stream_size(file: FileStorage) -> int:
    stream = file.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def _check_size(file: FileStorage) -> None:
    limit = current_app.config.get('MAX_UPLOAD_SIZE', 5 * 1024 * 1024)
    size = _stream_size(file)
    if size == 0:
        raise UploadError('Uploaded file is empty')
    if size > limit:
        raise UploadError(f'File exceeds maximum upload size of {limit // (1024 * 1024)} MB')


def save_screenshot(file: FileStorage | None, subfolder: str | None = None) -> str:
    """
    Store an uploaded screenshot and return its public URL path.

    Args:
        file: The uploaded file from the form
        subfolder: Directory under ``uploads/`` (defaults to UPLOAD_SUBDIR)

    Raises:
        UploadError: when no file was sent, it is the wrong type or size, or it cannot be written
    """
    if not file or not file.filename:
        raise UploadError('No file provided')
    if not allowed_file(file.filename):
        raise UploadError('Unsupported file type')
    _check_size(file)

    folder = subfolder or current_app.config.get('UPLOAD_SUBDIR', 'screenshots')
    target_dir = _inside_static(_static_root() / UPLOADS_DIR / folder)
    target = target_dir / f"{uuid.uuid4().hex}.{_extension(file.filename)}"

    file.stream.seek(0)
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        file.save(str(target))
    except OSError as exc:
        current_app.logger.error(f"Failed to save screenshot {file.filename}: {exc}")
        raise UploadError('Failed to store uploaded file') from exc

    url = URL_PREFIX + target.relative_to(_static_root()).as_posix()
    current_app.logger.info(f"Stored screenshot {file.filename} at {url}")
    return url


def is_stored_screenshot(url: str | None) -> bool:
    """True only for URLs that point at a file saved by ``save_screenshot``."""
    if not url:
        return False
    folder = current_app.config.get('UPLOAD_SUBDIR', 'screenshots')
    prefix = f"{URL_PREFIX}{UPLOADS_DIR}/{folder}/"
    name = url[len(prefix):]
    return url.startswith(prefix) and bool(name) and '/' not in name and '..' not in name


def delete_upload(file_url: str | None) -> bool:
    """Remove a stored screenshot by URL; used when the submission it belonged to fails."""
    if not file_url or not file_url.startswith(URL_PREFIX):
        return False
    target = _inside_static(_static_root() / file_url[len(URL_PREFIX):])
    if not target.is_file():
        return False
    target.unlink()
    return True


__all__ = ['ALLOWED_EXTENSIONS', 'allowed_file', 'save_screenshot', 'is_stored_screenshot', 'delete_upload']
