"""Shared fakes and payloads for the playback tests."""

import asyncio

import pytest

from exceptions import ServiceUnavailableError
from trace_model import Step, Trace

SIMPLE_SOURCE = "x = 1\nprint(x)"

SUCCESS_PAYLOAD = {
    "steps": [
        {"line_no": 1, "locals": {"x": "1"}},
        {"line_no": 2, "locals": {"x": "1"}},
    ],
    "output": "1\n",
}

COMPILE_ERROR_PAYLOAD = {
    "status": "compile_error",
    "error_type": "IndentationError",
    "line_no": 3,
    "message": "unexpected indent",
}

RUNTIME_ERROR_PAYLOAD = {
    "status": "runtime_error",
    "steps": [{"line_no": 1, "locals": {"a": "10"}}],
    "message": "ZeroDivisionError",
    "output": "partial\n",
}


def make_trace(n: int) -> Trace:
    return Trace(tuple(Step(line_no=i + 1, locals={"i": str(i)}) for i in range(n)))


class FakeExecutionClient:
    """Returns queued payloads (or raises queued exceptions) in order."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.codes = []

    async def run(self, code):
        self.codes.append(code)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class GatedExecutionClient:
    """Each call blocks until the test releases it with a payload."""

    def __init__(self):
        self.pending = []

    async def run(self, code):
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future


class FakeExplanationClient:
    def __init__(self, text="This line assigns 1 to x.", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def explain(self, code, step):
        self.calls.append((code, step))
        if self.error is not None:
            raise self.error
        return self.text


class GatedExplanationClient:
    """Each call blocks until the test resolves its future."""

    def __init__(self):
        self.pending = []
        self.calls = []

    async def explain(self, code, step):
        self.calls.append((code, step))
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future


async def settle():
    """Let every ready task run."""
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture
def unavailable():
    return ServiceUnavailableError("connection refused")
