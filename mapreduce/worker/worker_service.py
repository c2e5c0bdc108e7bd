import logging

from mapreduce.storage.errors import InvalidLocation
from mapreduce.storage.location import Location
from mapreduce.storage.naming import DEFAULT_NAMING
from .algorithm import count_words, dump_counts, load_counts, merge_all, normalize_parts, split_lines

logger = logging.getLogger(__name__)

TEXT_CONTENT_TYPE = "text/plain"
JSON_CONTENT_TYPE = "application/json"


def as_location(location):
    if isinstance(location, Location):
        return location
    return Location.parse(location)


class WorkerService:
    """
    Split, map and reduce stages.

    Holds no state between calls apart from the store and naming convention it
    was given, so any number of instances may run against the same store.
    """
    def __init__(self, store, naming=DEFAULT_NAMING):
        self.store = store
        self.naming = naming

    def split(self, source, parts=None):
        source = as_location(source)
        parts = normalize_parts(parts)

        data = self.store.get(source)
        logger.info(f"splitting {source} ({len(data)} bytes) into at most {parts} chunks")

        chunks = []
        for i, chunk in split_lines(data, parts):
            chunk_location = source.sibling(self.naming.chunk_key(i))
            self.store.put(chunk_location, chunk, TEXT_CONTENT_TYPE)
            chunks.append(chunk_location)

        logger.info(f"wrote {len(chunks)} chunks of {source}")
        return chunks

    def map_chunk(self, chunk):
        chunk = as_location(chunk)

        data = self.store.get(chunk)
        word_cnt = count_words(data.decode(errors="replace"))

        output = chunk.sibling(self.naming.partial_key(chunk.key))
        self.store.put(output, dump_counts(word_cnt), JSON_CONTENT_TYPE)
        logger.info(f"mapped {chunk} to {output} ({len(word_cnt)} distinct words)")
        return output

    def reduce(self, partials):
        partials = [as_location(p) for p in partials]
        if len(partials) == 0:
            raise InvalidLocation("reduce needs at least one partial location")
        containers = {p.container for p in partials}
        if len(containers) > 1:
            raise InvalidLocation(f"partials span several containers: {sorted(containers)}")

        # Every partial is read and validated before anything is written.
        parsed = [load_counts(self.store.get(p), source=str(p)) for p in partials]
        total = merge_all(parsed)

        output = partials[0].sibling(self.naming.result_key())
        self.store.put(output, dump_counts(total), JSON_CONTENT_TYPE)
        logger.info(f"reduced {len(partials)} partials into {output} ({len(total)} distinct words)")
        return output
