"""
Tests for the object store adapters
"""

from unittest.mock import MagicMock

import pytest
import requests
from google.api_core.exceptions import Forbidden, InternalServerError, NotFound, ServiceUnavailable
from google.auth.exceptions import RefreshError, TransportError
from google.cloud.storage.retry import DEFAULT_RETRY

from mapreduce.storage.errors import ObjectNotFound, StorageReadFailure, StorageWriteFailure
from mapreduce.storage.location import Location
from mapreduce.storage.store import GcsObjectStore, MemoryObjectStore

LOCATION = Location("bucket", "chunks/chunk-0.txt")


@pytest.fixture
def gcs_client():
    return MagicMock()


def blob_of(client):
    return client.bucket.return_value.blob.return_value


class TestGcsObjectStore:

    def test_get_reads_blob_without_retry(self, gcs_client):
        blob_of(gcs_client).download_as_bytes.return_value = b"data"

        assert GcsObjectStore(gcs_client).get(LOCATION) == b"data"
        gcs_client.bucket.assert_called_once_with("bucket")
        gcs_client.bucket.return_value.blob.assert_called_once_with("chunks/chunk-0.txt")
        blob_of(gcs_client).download_as_bytes.assert_called_once_with(retry=None)

    def test_put_uploads_with_content_type(self, gcs_client):
        GcsObjectStore(gcs_client).put(LOCATION, b"data", "text/plain")
        blob_of(gcs_client).upload_from_string.assert_called_once_with(b"data", content_type="text/plain", retry=None)

    def test_retry_policy_is_passed_through(self, gcs_client):
        store = GcsObjectStore(gcs_client, retry=DEFAULT_RETRY)
        store.get(LOCATION)
        store.put(LOCATION, b"", "text/plain")
        blob_of(gcs_client).download_as_bytes.assert_called_once_with(retry=DEFAULT_RETRY)
        blob_of(gcs_client).upload_from_string.assert_called_once_with(b"", content_type="text/plain", retry=DEFAULT_RETRY)

    def test_missing_object(self, gcs_client):
        blob_of(gcs_client).download_as_bytes.side_effect = NotFound("no such object")
        with pytest.raises(ObjectNotFound):
            GcsObjectStore(gcs_client).get(LOCATION)

    @pytest.mark.parametrize("error", [
        InternalServerError("boom"),
        Forbidden("denied"),
        requests.exceptions.ConnectionError("reset"),
        TransportError("metadata unreachable"),
    ])
    def test_read_failure(self, gcs_client, error):
        blob_of(gcs_client).download_as_bytes.side_effect = error
        with pytest.raises(StorageReadFailure) as e:
            GcsObjectStore(gcs_client).get(LOCATION)
        assert not isinstance(e.value, ObjectNotFound)

    @pytest.mark.parametrize("error", [
        ServiceUnavailable("try later"),
        requests.exceptions.Timeout("slow"),
        RefreshError("token expired"),
    ])
    def test_write_failure(self, gcs_client, error):
        blob_of(gcs_client).upload_from_string.side_effect = error
        with pytest.raises(StorageWriteFailure):
            GcsObjectStore(gcs_client).put(LOCATION, b"data", "text/plain")


class TestMemoryObjectStore:

    def test_put_then_get(self):
        store = MemoryObjectStore()
        store.put(LOCATION, b"data", "text/plain")
        assert store.get(LOCATION) == b"data"
        assert store.content_type(LOCATION) == "text/plain"

    def test_put_overwrites(self):
        store = MemoryObjectStore()
        store.put(LOCATION, b"old", "text/plain")
        store.put(LOCATION, b"new", "application/json")
        assert store.get(LOCATION) == b"new"
        assert store.content_type(LOCATION) == "application/json"

    def test_containers_are_separate(self):
        store = MemoryObjectStore()
        store.put(LOCATION, b"data", "text/plain")
        with pytest.raises(ObjectNotFound):
            store.get(Location("other", LOCATION.key))
        assert store.keys("bucket") == [LOCATION.key]
        assert store.keys("other") == []
