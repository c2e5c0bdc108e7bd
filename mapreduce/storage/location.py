from dataclasses import dataclass

from .errors import InvalidLocation

SCHEME = "gs"
PREFIX = SCHEME + "://"

# Location is of the form "gs://bucket_name/file_path".
@dataclass(frozen=True)
class Location:
    container: str
    key: str

    @classmethod
    def parse(cls, text):
        if not text:
            raise InvalidLocation("missing location")
        if not text.startswith(PREFIX):
            raise InvalidLocation(f"location must start with {PREFIX}: {text}")

        container, _, key = text[len(PREFIX):].partition("/")
        if not container or not key:
            raise InvalidLocation(f"invalid location, need container and key: {text}")
        return cls(container, key)

    def sibling(self, key):
        return Location(self.container, key)

    def __str__(self):
        return f"{PREFIX}{self.container}/{self.key}"
