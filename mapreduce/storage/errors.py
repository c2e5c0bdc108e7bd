class PipelineError(Exception):
    """Base class for every failure a stage surfaces to its caller."""


class InvalidLocation(PipelineError):
    pass


class StorageReadFailure(PipelineError):
    pass


class ObjectNotFound(StorageReadFailure):
    pass


class StorageWriteFailure(PipelineError):
    pass


class MalformedPartialPayload(PipelineError):
    pass
