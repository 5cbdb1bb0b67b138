# tests/_stubs.py
import os

from docportal.core.storage import BlobStorageError, StoredBlob


class FakeBlobStorage:
    """In-memory stand-in for CloudinaryStorage.

    Records the staged path seen by every upload (and whether it existed at
    that moment) plus every delete. Set ``fail_uploads`` or ``fail_deletes``
    to make the corresponding call raise ``BlobStorageError``.
    """

    configured = True

    def __init__(self):
        self.fail_uploads = False
        self.fail_deletes = False
        self.uploads = []  # (path, existed, folder)
        self.deleted = []
        self._counter = 0

    async def upload(self, path, folder):
        self.uploads.append((path, os.path.exists(path), folder))
        if self.fail_uploads:
            raise BlobStorageError("simulated outage")
        self._counter += 1
        return StoredBlob(
            url=f"https://blobs.test/{folder}/{self._counter}",
            public_id=f"raw/{folder}/{self._counter}",
        )

    async def delete(self, public_id):
        if self.fail_deletes:
            raise BlobStorageError("simulated outage")
        self.deleted.append(public_id)

    @property
    def staged_paths(self):
        return [path for path, _, _ in self.uploads]
