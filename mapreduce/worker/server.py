import logging
import os
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from mapreduce.storage.errors import (
    InvalidLocation,
    MalformedPartialPayload,
    ObjectNotFound,
    PipelineError,
    StorageReadFailure,
    StorageWriteFailure,
)
from mapreduce.storage.naming import DEFAULT_NAMING
from .utils import create_store, env_int
from .worker_service import WorkerService

logger = logging.getLogger(__name__)

# Most specific class first.
ERROR_STATUS = [
    (InvalidLocation, 400),
    (MalformedPartialPayload, 400),
    (ObjectNotFound, 404),
    (StorageReadFailure, 500),
    (StorageWriteFailure, 500),
]


def error_status(e):
    for cls, status in ERROR_STATUS:
        if isinstance(e, cls):
            return status
    return 500


def parse_parts(value, default):
    if value is None or value == "":
        return default
    try:
        parts = int(value)
    except ValueError:
        return default
    return parts if parts > 0 else default


def first_arg(*names):
    for name in names:
        value = request.values.get(name)
        if value:
            return value
    return None


def create_app(store=None, naming=DEFAULT_NAMING):
    app = Flask(__name__)
    app.config["DEFAULT_PARTS"] = env_int("DEFAULT_PARTS", 3)
    service = WorkerService(store if store is not None else create_store(), naming)

    @app.errorhandler(PipelineError)
    def handle_pipeline_error(e):
        status = error_status(e)
        if status >= 500:
            logger.error(f"{request.path} failed: {type(e).__name__}: {e}")
        else:
            logger.info(f"{request.path} rejected: {type(e).__name__}: {e}")
        return jsonify(error=type(e).__name__, message=str(e)), status

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception(f"{request.path} failed unexpectedly")
        return jsonify(error="InternalError", message=str(e)), 500

    @app.route("/health")
    def health():
        return "ok", 200, {"Content-Type": "text/plain"}

    @app.route("/split", methods=["GET", "POST"])
    def split():
        source = first_arg("s3", "source")
        if source is None:
            raise InvalidLocation("missing query param: source")

        parts = parse_parts(request.values.get("parts"), app.config["DEFAULT_PARTS"])
        chunks = service.split(source, parts)
        return jsonify(chunks=[str(c) for c in chunks])

    @app.route("/map", methods=["GET", "POST"])
    def map_chunk():
        chunk = first_arg("s3", "chunk")
        if chunk is None:
            raise InvalidLocation("missing query param: chunk")

        return jsonify(output=str(service.map_chunk(chunk)))

    @app.route("/reduce", methods=["GET", "POST"])
    def reduce():
        inputs = request.values.getlist("input")
        if not inputs:
            legacy = [request.values.get(name) for name in ("u1", "u2", "u3")]
            if any(legacy):
                if not all(legacy):
                    raise InvalidLocation("missing u1/u2/u3")
                inputs = legacy

        if not inputs:
            raise InvalidLocation("missing query param: input")

        return jsonify(output=str(service.reduce(inputs)))

    return app


def serve():
    host = os.environ.get("HTTP_HOST", "0.0.0.0")
    port = env_int("HTTP_PORT", 8080)
    app = create_app()
    logger.info(f"worker listening on {host}:{port}")
    app.run(host=host, port=port)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    serve()
