import logging
import os
from google.cloud import storage
from google.cloud.storage.retry import DEFAULT_RETRY

from mapreduce.storage.store import GcsObjectStore, MemoryObjectStore

logger = logging.getLogger(__name__)


def env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        logger.warning(f"ignoring non-numeric {name}={os.environ[name]!r}, using {default}")
        return default


def create_store():
    backend = os.environ.get("STORAGE_BACKEND", "gcs")
    if backend == "memory":
        logger.info("using in-memory object store")
        return MemoryObjectStore()
    elif backend == "gcs":
        retry = DEFAULT_RETRY if env_flag("STORAGE_RETRY") else None
        logger.info(f"using google cloud storage, retries {'enabled' if retry else 'disabled'}")
        return GcsObjectStore(storage.Client(), retry=retry)
    else:
        raise ValueError(f"unknown STORAGE_BACKEND: {backend}")
