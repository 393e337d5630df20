"""BlobStore tests — file layout, atomic overwrite, key validation."""

import pytest

from sealnote.errors import BadRequest, NotFound
from sealnote.storage.blob_store import MESSAGE_NAMESPACE, BlobReadError, BlobStore


def test_put_creates_directories_and_uses_plain_layout(tmp_path):
    store = BlobStore(tmp_path / "root")
    path = store.put(MESSAGE_NAMESPACE, "m1", b"hello")
    assert path == tmp_path / "root" / "message" / "m1"
    assert path.read_bytes() == b"hello"


def test_get_streams_bytes(tmp_path):
    store = BlobStore(tmp_path)
    data = b"abc" * 50_000  # spans several chunks
    store.put(MESSAGE_NAMESPACE, "m1", data)

    chunks = list(store.get(MESSAGE_NAMESPACE, "m1"))
    assert len(chunks) > 1
    assert b"".join(chunks) == data


def test_overwrite_leaves_no_temp_files(tmp_path):
    store = BlobStore(tmp_path)
    store.put(MESSAGE_NAMESPACE, "m1", b"old-content-longer")
    store.put(MESSAGE_NAMESPACE, "m1", b"new")

    assert store.read(MESSAGE_NAMESPACE, "m1") == b"new"
    assert [p.name for p in (tmp_path / "message").iterdir()] == ["m1"]


def test_missing_blob_is_not_found(tmp_path):
    store = BlobStore(tmp_path)
    with pytest.raises(NotFound):
        store.get(MESSAGE_NAMESPACE, "nothing")
    assert store.exists(MESSAGE_NAMESPACE, "nothing") is False


@pytest.mark.parametrize("key", ["../escape", "a/b", "", ".hidden", "x" * 65])
def test_unsafe_keys_rejected(tmp_path, key):
    store = BlobStore(tmp_path)
    with pytest.raises(BadRequest):
        store.put(MESSAGE_NAMESPACE, key, b"x")


def test_delete(tmp_path):
    store = BlobStore(tmp_path)
    store.put(MESSAGE_NAMESPACE, "m1", b"x")
    assert store.delete(MESSAGE_NAMESPACE, "m1") is True
    assert store.delete(MESSAGE_NAMESPACE, "m1") is False
    assert not store.exists(MESSAGE_NAMESPACE, "m1")


class FlakyHandle:
    """Returns one chunk, then fails as if the disk went away."""

    def __init__(self):
        self.reads = 0
        self.closed = False

    def read(self, size):
        self.reads += 1
        if self.reads > 1:
            raise OSError(5, "Input/output error")
        return b"first"

    def close(self):
        self.closed = True


def test_read_error_mid_stream_is_blob_read_error():
    fh = FlakyHandle()
    chunks = BlobStore._iter_chunks(fh, MESSAGE_NAMESPACE, "m1")

    assert next(chunks) == b"first"
    with pytest.raises(BlobReadError):
        next(chunks)
    assert fh.closed is True
