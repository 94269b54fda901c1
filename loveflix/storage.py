"""Bucket file storage: upload a file, get back its public URL."""

import io
import logging
import mimetypes
import re
import time
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from loveflix.config import Config

logger = logging.getLogger(__name__)

MEMORIES_BUCKET = "memories"  # photos and video thumbnails
VIDEOS_BUCKET = "videos"
BUCKETS = (MEMORIES_BUCKET, VIDEOS_BUCKET)

_SAFE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class UploadError(Exception):
    """An upload was rejected or could not be stored."""


def _probe_image(data: bytes) -> tuple[int, int]:
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.verify()
            return im.width, im.height
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise UploadError(f"not a valid image ({e})") from e


class MediaStorage:
    """Files live under <root>/<bucket>/<name> and are served from public_base_url."""

    def __init__(self, config: Config) -> None:
        self.root = config.resolved_storage_dir
        self.public_base_url = config.storage.public_base_url.rstrip("/")
        self.max_file_size = config.storage.max_file_size

    def _path(self, bucket: str, name: str) -> Path:
        if bucket not in BUCKETS:
            raise UploadError(f"unknown bucket {bucket!r}")
        if not _SAFE_NAME.match(name):
            raise UploadError(f"invalid file name {name!r}")
        return self.root / bucket / name

    def get_public_url(self, bucket: str, name: str) -> str:
        self._path(bucket, name)
        return f"{self.public_base_url}/{bucket}/{name}"

    def upload(self, bucket: str, name: str, data: bytes) -> Path:
        path = self._path(bucket, name)
        if not data:
            raise UploadError("file is empty")
        if len(data) > self.max_file_size:
            raise UploadError(f"file is larger than {self.max_file_size} bytes")
        if path.exists():
            raise UploadError(f"{bucket}/{name} already exists")

        if bucket == MEMORIES_BUCKET:
            width, height = _probe_image(data)
            logger.debug("Image %s is %dx%d", name, width, height)
        else:
            mime, _ = mimetypes.guess_type(name)
            if not (mime and mime.startswith("video/")):
                raise UploadError(f"unsupported type: {mime or 'unknown'}")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise UploadError(str(e)) from e
        logger.info("Uploaded %s/%s (%d bytes)", bucket, name, len(data))
        return path

    def upload_file(self, bucket: str, original_name: str, data: bytes) -> str:
        """Store under a timestamped name, keeping the extension. Returns the public URL."""
        ext = Path(original_name).suffix.lstrip(".").lower() or "bin"
        stamp = int(time.time() * 1000)
        name = f"{stamp}.{ext}"
        while (self.root / bucket / name).exists():
            stamp += 1
            name = f"{stamp}.{ext}"
        self.upload(bucket, name, data)
        return self.get_public_url(bucket, name)
