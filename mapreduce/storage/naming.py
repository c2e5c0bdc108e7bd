from dataclasses import dataclass


@dataclass(frozen=True)
class NamingConvention:
    """
    Object key layout shared by all stages.

    Every stage derives the keys it reads and writes from this convention alone,
    so a later stage can find an earlier stage's output without asking the store.
    """
    chunk_prefix: str = "chunks/"
    chunk_stem: str = "chunk-"
    chunk_suffix: str = ".txt"
    partial_prefix: str = "maps/"
    partial_suffix: str = ".json"
    final_key: str = "final/result.json"

    def chunk_key(self, index: int) -> str:
        return f"{self.chunk_prefix}{self.chunk_stem}{index}{self.chunk_suffix}"

    def partial_key(self, chunk_key: str) -> str:
        # e.g. chunks/chunk-0.txt => maps/chunk-0.json
        base = chunk_key.removeprefix(self.chunk_prefix).removesuffix(self.chunk_suffix)
        return f"{self.partial_prefix}{base}{self.partial_suffix}"

    def result_key(self) -> str:
        return self.final_key


DEFAULT_NAMING = NamingConvention()
