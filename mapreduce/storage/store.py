import threading

import requests
from google.api_core.exceptions import GoogleAPIError, NotFound
from google.auth.exceptions import GoogleAuthError

from .errors import ObjectNotFound, StorageReadFailure, StorageWriteFailure


class ObjectStore:
    """
    Durable blob storage addressed by Location.

    get raises ObjectNotFound or StorageReadFailure, put raises StorageWriteFailure.
    Writes to an existing key overwrite it.
    """
    def get(self, location) -> bytes:
        raise NotImplementedError()

    def put(self, location, data: bytes, content_type: str) -> None:
        raise NotImplementedError()


class GcsObjectStore(ObjectStore):
    """
    Google Cloud Storage backed store.

    retry is passed to every client library call. None disables retries, so a
    transient failure reaches the caller; pass google.cloud.storage.retry.DEFAULT_RETRY
    or any google.api_core.retry.Retry to opt in.
    """
    def __init__(self, client, retry=None):
        self.client = client
        self.retry = retry

    def _blob(self, location):
        return self.client.bucket(location.container).blob(location.key)

    def get(self, location) -> bytes:
        try:
            return self._blob(location).download_as_bytes(retry=self.retry)
        except NotFound as e:
            raise ObjectNotFound(f"object not found: {location}") from e
        except (GoogleAPIError, GoogleAuthError, requests.exceptions.RequestException) as e:
            raise StorageReadFailure(f"failed to read {location}: {e}") from e

    def put(self, location, data: bytes, content_type: str) -> None:
        try:
            self._blob(location).upload_from_string(data, content_type=content_type, retry=self.retry)
        except (GoogleAPIError, GoogleAuthError, requests.exceptions.RequestException) as e:
            raise StorageWriteFailure(f"failed to write {location}: {e}") from e


class MemoryObjectStore(ObjectStore):
    """
    In-process store, for tests and local runs.
    """
    def __init__(self):
        self.objects = {}
        self.lock = threading.Lock()

    def get(self, location) -> bytes:
        with self.lock:
            entry = self.objects.get((location.container, location.key))
        if entry is None:
            raise ObjectNotFound(f"object not found: {location}")
        return entry[0]

    def put(self, location, data: bytes, content_type: str) -> None:
        with self.lock:
            self.objects[(location.container, location.key)] = (bytes(data), content_type)

    def content_type(self, location):
        with self.lock:
            entry = self.objects.get((location.container, location.key))
        if entry is None:
            raise ObjectNotFound(f"object not found: {location}")
        return entry[1]

    def keys(self, container):
        with self.lock:
            return sorted(k for (c, k) in self.objects if c == container)
