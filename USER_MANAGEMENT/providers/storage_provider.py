import logging
import os
import secrets
from datetime import datetime, timezone
from core.config import STORAGE_MODE, UPLOAD_BASE_PATH, PUBLIC_STORAGE_URL
from core.exceptions import StorageError

logger = logging.getLogger(__name__)


class LocalStorageProvider:
    """
    Public disk on the local filesystem.
    Blobs are addressed by a path relative to `root` ("profile_images/abc.png"),
    which is what gets stored on the user row. The app serves `root` under
    `public_url`, so url() is a plain join.
    """

    def __init__(self, root: str, public_url: str):
        self.root = os.path.abspath(root)
        self.public_url = public_url.rstrip("/")

    def put(self, collection: str, content: bytes, extension: str) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
        filename = f"{timestamp}_{secrets.token_hex(8)}.{extension.lstrip('.')}"
        relative_path = f"{collection.strip('/')}/{filename}"
        full_path = self._full_path(relative_path)
        try:
            os.makedirs(os.path.dirname(full_path), exist_ok=True)
            with open(full_path, "wb") as f:
                f.write(content)
        except OSError as e:
            raise StorageError(f"Could not store {relative_path}") from e

        logger.info(f"Stored blob {relative_path} ({len(content)} bytes)")
        return relative_path

    def delete(self, path: str) -> None:
        full_path = self._full_path(path)
        if not os.path.exists(full_path):
            logger.info(f"Blob {path} already absent, nothing to delete")
            return
        try:
            os.remove(full_path)
        except OSError as e:
            raise StorageError(f"Could not delete {path}") from e
        logger.info(f"Deleted blob {path}")

    def url(self, path: str) -> str:
        return f"{self.public_url}/{path.lstrip('/')}"

    def _full_path(self, path: str) -> str:
        full_path = os.path.abspath(os.path.join(self.root, path))
        if os.path.commonpath([self.root, full_path]) != self.root:
            raise StorageError(f"Path escapes storage root: {path}")
        return full_path


def get_storage_provider():
    if STORAGE_MODE == "local":
        return LocalStorageProvider(UPLOAD_BASE_PATH, PUBLIC_STORAGE_URL)
    raise RuntimeError(f"Unsupported STORAGE_MODE: {STORAGE_MODE}")
