"""Pytest configuration and fixtures."""

import json
import random

import httpx
import pytest

from log_middleware import LogEmitter
from log_middleware.logging_config import setup_logging
from shortener import ShortCodeGenerator, ShortenerService


LOG_API_URL = "http://logs.test/evaluation-service/logs"


class RecordingTraceSink:
    """Trace sink that remembers every call."""

    def __init__(self):
        self.calls = []

    def info(self, *args):
        self.calls.append(("info", args))

    def warn(self, *args):
        self.calls.append(("warn", args))

    def error(self, *args):
        self.calls.append(("error", args))

    def success(self, *args):
        self.calls.append(("success", args))

    @property
    def channels(self):
        return [channel for channel, _ in self.calls]

    def text(self, channel):
        """All calls on one channel, each rendered as a single string."""
        return [
            " ".join(str(a) for a in args)
            for name, args in self.calls
            if name == channel
        ]


class FakeLogServer:
    """Handler for httpx.MockTransport standing in for the logging API."""

    def __init__(self, status_code=200, body="", error=None):
        self.status_code = status_code
        self.body = body
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.body)

    @property
    def payloads(self):
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def trace():
    """Recording trace sink."""
    return RecordingTraceSink()


@pytest.fixture
def log_server():
    """Fake logging API that accepts everything."""
    return FakeLogServer(status_code=200, body='{"logID": "1"}')


@pytest.fixture
def emitter(trace, log_server):
    """Log emitter wired to the fake logging API."""
    emitter = LogEmitter(
        LOG_API_URL,
        trace=trace,
        timeout=1.0,
        transport=httpx.MockTransport(log_server),
    )
    yield emitter
    emitter.close()


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(length=6, rng=random.Random(1234))


@pytest.fixture
def service(emitter, short_code_generator, logger):
    """Create service instance."""
    return ShortenerService(
        emitter=emitter,
        short_code_generator=short_code_generator,
        logger=logger,
        base_url="https://sh.rt",
        stack="backend",
    )


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
