"""Utilities for base64-encoded zip archives exchanged with the metadata API"""

import base64
import binascii
import io
import logging
import os
import time
import zipfile
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional, Union

from ..api.exceptions import ArchiveError
from ..constants import ARCHIVE_ROOT, ZIP_COMPRESSION_LEVEL

logger = logging.getLogger(__name__)

# Receives (path, content) and returns the content to write; falsy skips the file
UnzipCallback = Callable[[str, bytes], Optional[bytes]]


def make_zip(base_dir: Union[str, Path],
             files: Iterable[str],
             extra: Optional[Mapping[str, Union[str, bytes]]] = None) -> str:
    """Create a base64 zip from files relative to ``base_dir``

    Paths that do not exist, or that are directories, are left out.
    Entries in ``extra`` are written from memory and take precedence
    over a file of the same name on disk.

    Args:
        base_dir: Directory the file list is relative to
        files: Relative file paths, e.g. from Manifest.to_archive_file_list
        extra: Archive name to content, e.g. a generated package.xml

    Returns:
        Base64-encoded zip archive

    Raises:
        ArchiveError: If called with no files
    """
    files = list(files)
    extra = dict(extra or {})
    if not files and not extra:
        raise ArchiveError("It is invalid to call make_zip with no files.")

    base_dir = Path(base_dir)
    present = [
        name for name in files
        if name.replace("\\", "/") not in extra and (base_dir / name).is_file()
    ]
    logger.debug("File list for zipping: %s", present)
    logger.info("Writing zip file with %d files", len(present) + len(extra))

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED,
                         compresslevel=ZIP_COMPRESSION_LEVEL) as archive:
        for name in present:
            archive.write(base_dir / name, arcname=name.replace("\\", "/"))
        for name, content in extra.items():
            archive.writestr(name, content)

    return base64.b64encode(buffer.getvalue()).decode('ascii')


def unzip(dest: Union[str, Path],
          data: str,
          callback: Optional[UnzipCallback] = None) -> str:
    """Extract a base64 zip returned by a retrieve into ``dest``

    The leading ``unpackaged/`` segment of each entry is replaced by
    ``dest``. The callback may rewrite a file's content before it is
    written, or return a falsy value to skip it.

    Returns:
        "Success"

    Raises:
        ArchiveError: If there is no destination or the data is not a zip
    """
    if not dest:
        raise ArchiveError("No destination!")

    dest = Path(dest)
    logger.info("Unzipping files to %s", dest)

    try:
        raw = base64.b64decode(data, validate=False)
        archive = zipfile.ZipFile(io.BytesIO(raw))
    except (binascii.Error, zipfile.BadZipFile, ValueError) as e:
        raise ArchiveError(f"Couldn't unzip data: {e}")

    with archive:
        for info in archive.infolist():
            parts = info.filename.split("/")
            if parts and parts[0] == ARCHIVE_ROOT:
                parts = parts[1:]
            relative = "/".join(part for part in parts if part)
            if ".." in relative.split("/"):
                raise ArchiveError(f"Refusing to extract outside {dest}: {info.filename}")

            if info.is_dir() or not relative:
                (dest / relative).mkdir(parents=True, exist_ok=True)
                continue

            path = dest / relative
            path.parent.mkdir(parents=True, exist_ok=True)

            content = archive.read(info)
            if callback:
                content = callback(str(path), content)
            if not content:
                continue

            path.write_bytes(content)
            stored_time = time.mktime(info.date_time + (0, 0, -1))
            os.utime(path, (stored_time, stored_time))

    return "Success"
