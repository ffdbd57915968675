"""
Local filesystem store for uploaded images.

The storage root is a flat directory: every image lives directly under it
and is addressed by its bare filename.
"""

import base64
import logging
import os
import re
import secrets
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from screenshot_api.errors import NotFoundError
from screenshot_api.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = re.compile(r"^data:image/[A-Za-z0-9.+-]+;base64,")
DEFAULT_CONTENT_TYPE = "image/png"
URLSAFE_TO_STANDARD = str.maketrans("-_", "+/")


@dataclass(frozen=True)
class StoredImage:
    """An image that has been written to the store."""
    filename: str
    size: int
    content_type: str
    path: Path

    @property
    def url(self) -> str:
        return f"/uploads/{self.filename}"


def decode_base64_image(payload: str) -> bytes:
    """Decode a base64 image, with or without a ``data:image/<type>;base64,`` header.

    Both the standard and the URL-safe alphabets are accepted. Missing ``=``
    padding is tolerated and other stray characters are skipped; input that
    still cannot be decoded raises ``binascii.Error``.
    """
    data = DATA_URL_PREFIX.sub("", payload.strip(), count=1)
    data = "".join(data.split()).translate(URLSAFE_TO_STANDARD)
    data += "=" * (-len(data) % 4)
    return base64.b64decode(data)


def is_safe_filename(name: str) -> bool:
    """True if ``name`` is a plain filename that stays inside the storage root."""
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\\" in name or "\x00" in name:
        return False
    return Path(name).name == name


class LocalImageStore:
    """Flat image store rooted at a local directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()

    def ensure_root(self) -> Path:
        """Create the storage root if it does not exist yet."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def generate_filename(self) -> str:
        """``screenshot-<unix-ms>-<random hex>.png``, unique per upload."""
        timestamp_ms = int(time.time() * 1000)
        return f"screenshot-{timestamp_ms}-{secrets.token_hex(4)}.png"

    @log_execution_time
    def save(
        self,
        data: bytes,
        filename: Optional[str] = None,
        content_type: str = DEFAULT_CONTENT_TYPE,
    ) -> StoredImage:
        """Write ``data`` under ``filename`` (or a generated name).

        The bytes go to a temporary file in the root first and are renamed
        into place, so a failed write never leaves a partial image behind.
        An existing file with the same name is replaced.
        """
        filename = filename or self.generate_filename()
        if not is_safe_filename(filename):
            raise ValueError(f"Invalid filename: {filename!r}")

        self.ensure_root()
        dest_path = self.root / filename

        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".upload-", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as tmp_file:
                tmp_file.write(data)
            os.replace(tmp_name, dest_path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        try:
            size = dest_path.stat().st_size
        except OSError:
            dest_path.unlink(missing_ok=True)
            raise

        logger.info(f"Stored {filename} ({size} bytes) in {self.root}")
        return StoredImage(
            filename=filename,
            size=size,
            content_type=content_type,
            path=dest_path,
        )

    def resolve(self, filename: str) -> Path:
        """Path of an existing stored file.

        Raises:
            NotFoundError: if the file does not exist or the name points
                outside the storage root.
        """
        if not is_safe_filename(filename):
            raise NotFoundError(error="File not found", message=f"File '{filename}' not found")

        path = self.root / filename
        if not path.is_file():
            raise NotFoundError(error="File not found", message=f"File '{filename}' not found")
        return path
