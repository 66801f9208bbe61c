# io/recorder.py
import json
import logging
import sys
from dataclasses import asdict
from typing import Protocol

log = logging.getLogger("wheelpath.recorder")


class Sink(Protocol):
    def write(self, rep) -> None: ...


class JsonlSink:
    def __init__(self, fp=sys.stdout):
        self.fp = fp

    def write(self, rep) -> None:
        self.fp.write(json.dumps(asdict(rep)) + "\n")


class MemorySink:
    def __init__(self):
        self.reports: list = []

    def write(self, rep) -> None:
        self.reports.append(rep)


class Recorder:
    def __init__(self, *sinks: Sink):
        self.sinks = sinks or (JsonlSink(),)

    def emit(self, rep):
        for s in self.sinks:
            try:
                s.write(rep)
            except (OSError, TypeError, ValueError):
                # a broken analytics sink must not fail a plan
                log.warning("sink %s dropped %s", type(s).__name__, type(rep).__name__, exc_info=True)
