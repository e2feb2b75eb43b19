"""
Object storage for uploaded images.

Files live under `<prefix>/<millis>_<random>_<filename>` and are exposed through
durable URLs `<base_url>/<path>`. The production backend is a GridFS bucket in the
same MongoDB database; tests plug in an in-memory implementation.
"""
from typing import Optional, Tuple
from urllib.parse import quote, unquote, urlsplit
import logging
import secrets
import string
import time

from gridfs import GridFSBucket
from gridfs.errors import NoFile

from rajaoil_admin.errors import MediaNotFoundError
from rajaoil_admin.utils.string_utils import safe_file_name

logger = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


class MediaStorage:
    """Base class: path and URL handling shared by every backend."""

    def __init__(self, base_url: str, prefix: str):
        self.base_url = base_url.rstrip("/")
        self.prefix = prefix.strip("/")

    def build_path(self, file_name: str) -> str:
        timestamp = int(time.time() * 1000)
        suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
        safe_name = safe_file_name(file_name) or "image"
        return f"{self.prefix}/{timestamp}_{suffix}_{safe_name}"

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{quote(path)}"

    def path_from_url(self, url: str) -> Optional[str]:
        """Returns the storage path behind a URL issued by this storage, None otherwise."""
        if not url:
            return None
        decoded = unquote(url)
        base = self.base_url + "/"
        if not decoded.startswith(base):
            return None
        path = urlsplit(decoded[len(base):]).path
        return path or None

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        raise NotImplementedError

    def delete(self, path: str) -> None:
        raise NotImplementedError

    def open(self, path: str) -> Tuple[bytes, Optional[str]]:
        raise NotImplementedError


class GridFSMediaStorage(MediaStorage):
    def __init__(self, database, bucket_name: str, base_url: str, prefix: str):
        super().__init__(base_url, prefix)
        self.bucket = GridFSBucket(database, bucket_name=bucket_name)

    def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> str:
        self.bucket.upload_from_stream(path, data, metadata={"contentType": content_type})
        logger.info(f"✅ Stored {path} ({len(data)} bytes)")
        return self.url_for(path)

    def delete(self, path: str) -> None:
        stored = list(self.bucket.find({"filename": path}))
        if not stored:
            raise MediaNotFoundError(path)
        for grid_out in stored:
            self.bucket.delete(grid_out._id)
        logger.info(f"Deleted {path} from storage")

    def open(self, path: str) -> Tuple[bytes, Optional[str]]:
        try:
            stream = self.bucket.open_download_stream_by_name(path)
        except NoFile:
            raise MediaNotFoundError(path)
        metadata = stream.metadata or {}
        return stream.read(), metadata.get("contentType")
