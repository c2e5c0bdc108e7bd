"""
Pytest configuration and shared fixtures
"""

import pytest

from mapreduce.storage.errors import StorageReadFailure, StorageWriteFailure
from mapreduce.storage.location import Location
from mapreduce.storage.store import MemoryObjectStore
from mapreduce.worker.server import create_app
from mapreduce.worker.worker_service import WorkerService

BUCKET = "test-bucket"


class FaultyStore(MemoryObjectStore):
    """Memory store that fails reads or writes of chosen keys"""

    def __init__(self):
        super().__init__()
        self.fail_reads = set()
        self.fail_writes = set()

    def get(self, location):
        if location.key in self.fail_reads:
            raise StorageReadFailure(f"injected read failure: {location}")
        return super().get(location)

    def put(self, location, data, content_type):
        if location.key in self.fail_writes:
            raise StorageWriteFailure(f"injected write failure: {location}")
        super().put(location, data, content_type)


@pytest.fixture
def store():
    return FaultyStore()


@pytest.fixture
def service(store):
    return WorkerService(store)


@pytest.fixture
def sample_text():
    """Sample text for testing"""
    return """The quick brown fox jumps over the lazy dog.
The dog was really lazy.
The fox was very quick and brown.
Quick brown foxes are amazing animals.
Lazy dogs sleep all day."""


@pytest.fixture
def put_source(store):
    """Store text under a fresh source key and return its location"""
    def put(text, key="input/doc.txt"):
        location = Location(BUCKET, key)
        data = text.encode() if isinstance(text, str) else text
        store.put(location, data, "text/plain")
        return location
    return put


@pytest.fixture
def app(store):
    app = create_app(store=store)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def http(app):
    return app.test_client()
