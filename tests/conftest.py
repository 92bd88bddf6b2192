from pathlib import Path
from typing import Callable, List

import httpx
import pytest

from tool_relay.core.context import ExecutionContext, InMemoryKVStore
from tool_relay.core.tools import ToolProxy


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def ctx(workdir: Path) -> ExecutionContext:
    """An execution context rooted at an empty temporary project directory."""
    return ExecutionContext(working_directory=workdir, kv=InMemoryKVStore())


@pytest.fixture
def proxy(ctx: ExecutionContext) -> ToolProxy:
    return ToolProxy(ctx)


class RecordingTransport(httpx.MockTransport):
    """A MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def recording_transport() -> Callable[[Callable[[httpx.Request], httpx.Response]], RecordingTransport]:
    return RecordingTransport
