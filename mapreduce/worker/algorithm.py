import json
import re
from functools import reduce
from math import ceil

from mapreduce.storage.errors import MalformedPartialPayload

DEFAULT_PARTS = 3
WORD_RE = re.compile(r"[A-Za-z0-9']+")


def normalize_parts(parts):
    if isinstance(parts, int) and not isinstance(parts, bool) and parts > 0:
        return parts
    return DEFAULT_PARTS


def split_lines(data: bytes, parts: int):
    """
    Divide data into at most `parts` runs of consecutive lines.

    Yields (index, chunk_bytes). An input with fewer lines than `parts` produces
    fewer chunks. Empty input is a single empty line, so it yields one empty chunk.
    """
    lines = data.split(b"\n")
    chunk_size = ceil(len(lines) / parts)

    for i in range(parts):
        start = i * chunk_size
        if start >= len(lines):
            break
        end = min((i + 1) * chunk_size, len(lines))
        yield i, b"\n".join(lines[start:end])


def count_words(text: str):
    word_cnt = {}
    for word in WORD_RE.findall(text):
        word = word.lower()
        word_cnt[word] = word_cnt.get(word, 0) + 1
    return word_cnt


def merge_counts(a, b):
    result = dict(a)
    for word, cnt in b.items():
        result[word] = result.get(word, 0) + cnt
    return result


def merge_all(partials):
    return reduce(merge_counts, partials, {})


def dump_counts(word_cnt) -> bytes:
    # Stable ordering helps debugging
    return json.dumps(word_cnt, sort_keys=True, separators=(",", ":")).encode()


def load_counts(data: bytes, source="partial"):
    try:
        word_cnt = json.loads(data)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedPartialPayload(f"{source} is not valid json: {e}") from e

    if not isinstance(word_cnt, dict):
        raise MalformedPartialPayload(f"{source} is not a json object")

    for word, cnt in word_cnt.items():
        if isinstance(cnt, bool) or not isinstance(cnt, int) or cnt < 0:
            raise MalformedPartialPayload(f"{source} has invalid count for {word!r}: {cnt!r}")

    return word_cnt
