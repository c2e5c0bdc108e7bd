import logging
import sys
import requests

TIMEOUT = 300


class StageFailed(Exception):
    def __init__(self, error, message):
        super().__init__(f"{error}: {message}")
        self.error = error
        self.message = message


def call_stage(host_port, stage, params):
    url = f"http://{host_port}/{stage}"
    result = requests.post(url, params=params, timeout=TIMEOUT)
    if result.status_code != 200:
        try:
            body = result.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            raise StageFailed(f"HTTP {result.status_code}", result.text)
        raise StageFailed(body.get("error", "Error"), body.get("message", result.text))
    return result.json()


def split(host_port, source, parts=None):
    params = {"source": source}
    if parts is not None:
        params["parts"] = parts
    return call_stage(host_port, "split", params)["chunks"]


def map_chunk(host_port, chunk):
    return call_stage(host_port, "map", {"chunk": chunk})["output"]


def reduce(host_port, partials):
    return call_stage(host_port, "reduce", [("input", p) for p in partials])["output"]


def health(host_port):
    result = requests.get(f"http://{host_port}/health", timeout=TIMEOUT)
    return result.status_code == 200


def client(argv=None):
    argv = sys.argv if argv is None else argv
    if len(argv) <= 2:
        print("usage:", argv[0], "split|map|reduce|health", "host:port", "...")
        return 1

    command, host_port, args = argv[1], argv[2], argv[3:]
    try:
        if command == "split":
            if len(args) not in (1, 2):
                print("usage:", argv[0], "split", "host:port", "gs://bucket/key", "[parts]")
                return 1
            for chunk in split(host_port, args[0], args[1] if len(args) == 2 else None):
                print(chunk)
        elif command == "map":
            if len(args) != 1:
                print("usage:", argv[0], "map", "host:port", "gs://bucket/chunk")
                return 1
            print(map_chunk(host_port, args[0]))
        elif command == "reduce":
            if len(args) == 0:
                print("usage:", argv[0], "reduce", "host:port", "gs://bucket/partial...")
                return 1
            print(reduce(host_port, args))
        elif command == "health":
            ok = health(host_port)
            print("ok" if ok else "unhealthy")
            return 0 if ok else 1
        else:
            print("invalid command")
            return 1
    except StageFailed as e:
        print("stage failed:", e)
        return 1

    return 0


if __name__ == "__main__":
    logging.basicConfig()
    sys.exit(client())
