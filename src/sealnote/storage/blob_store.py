"""File-system blob store for message attachments.

Learn: blobs live at <root>/<namespace>/<key> with no extension. Writes
go to a temp file in the same directory and are renamed over the target,
so a reader sees either the old bytes or the new bytes, never half a
file. Concurrent writers race; the last rename wins.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Iterator

import structlog

from sealnote.config import settings
from sealnote.errors import BadRequest, DomainError, NotFound

logger = structlog.get_logger()

MESSAGE_NAMESPACE = "message"

CHUNK_SIZE = 64 * 1024

_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class BlobReadError(DomainError):
    """The blob vanished or became unreadable while streaming."""

    status_code = 500


class BlobStore:
    def __init__(self, root: str | os.PathLike):
        self.root = Path(root)

    def path_for(self, namespace: str, key: str) -> Path:
        for segment in (namespace, key):
            if not _SAFE_SEGMENT.match(segment):
                raise BadRequest(f"Invalid storage key: {segment!r}")
        return self.root / namespace / key

    def put(self, namespace: str, key: str, data: bytes) -> Path:
        """Write `data`, replacing any previous blob under the same key."""
        target = self.path_for(namespace, key)
        target.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{key}.")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info("blob.stored", namespace=namespace, key=key, size=len(data))
        return target

    def exists(self, namespace: str, key: str) -> bool:
        return self.path_for(namespace, key).is_file()

    def get(self, namespace: str, key: str) -> Iterator[bytes]:
        """Open the blob and return an iterator over its bytes.

        Raises NotFound up front; errors after the first chunk surface as
        BlobReadError from the iterator.
        """
        path = self.path_for(namespace, key)
        try:
            fh = open(path, "rb")
        except FileNotFoundError:
            raise NotFound(f"File not found: {namespace}/{key}")
        return self._iter_chunks(fh, namespace, key)

    def read(self, namespace: str, key: str) -> bytes:
        return b"".join(self.get(namespace, key))

    def delete(self, namespace: str, key: str) -> bool:
        """Remove a blob. Returns False if there was nothing to remove."""
        path = self.path_for(namespace, key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.info("blob.deleted", namespace=namespace, key=key)
        return True

    @staticmethod
    def _iter_chunks(fh, namespace: str, key: str) -> Iterator[bytes]:
        try:
            while True:
                try:
                    chunk = fh.read(CHUNK_SIZE)
                except OSError as e:
                    logger.error(
                        "blob.read_failed", namespace=namespace, key=key, error=str(e)
                    )
                    raise BlobReadError(f"Failed to read file: {namespace}/{key}")
                if not chunk:
                    return
                yield chunk
        finally:
            fh.close()


def get_blob_store() -> BlobStore:
    """FastAPI dependency — blob store rooted at the configured path."""
    return BlobStore(settings.storage_path)
