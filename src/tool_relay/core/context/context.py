"""Explicit execution context handed to every tool executor.

Executors never consult process-global state such as the current working directory;
everything they need (filesystem root, logger, key-value store, service credentials)
travels in an ExecutionContext so independent sessions can run side by side.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import httpx

from ..logger import get_logger
from .kv_store import InMemoryKVStore, KVStore

DEFAULT_CODE_RUNNER_URL = "https://api.riza.io"


@dataclass
class ExecutionContext:
    """
    Per-proxy state shared by the executors of one session.

    Attributes:
        working_directory: Root against which all relative paths resolve.
        logger: Logger sink for executor messages.
        kv: Key-value store for the context-tracking tools.
        namespace: KV namespace, so sessions sharing one store do not collide.
        session_id: Session identifier recorded in work-context entries.
        code_runner_api_key: Credential for the sandboxed code-execution service.
        code_runner_url: Base URL of the code-execution service.
        http_client: Optional shared HTTP client for outbound service calls.
    """

    working_directory: Path = field(default_factory=Path.cwd)
    logger: logging.Logger = field(default_factory=lambda: get_logger("tools"))
    kv: KVStore = field(default_factory=InMemoryKVStore)
    namespace: str = "default"
    session_id: str = "local_session"
    code_runner_api_key: Optional[str] = None
    code_runner_url: str = DEFAULT_CODE_RUNNER_URL
    http_client: Optional[httpx.AsyncClient] = None

    def __post_init__(self) -> None:
        self.working_directory = Path(self.working_directory).expanduser().resolve()

    def resolve(self, path: str | Path) -> Path:
        """Resolve ``path`` against the working directory.

        Every path is joined onto the root. An absolute path keeps its parts but loses
        its anchor, so ``/etc/hosts`` becomes ``<root>/etc/hosts``.

        Args:
            path: A path as given by the remote model.

        Returns:
            The path to operate on.
        """
        candidate = Path(path)
        if candidate.anchor:
            candidate = candidate.relative_to(candidate.anchor)
        return self.working_directory / candidate
