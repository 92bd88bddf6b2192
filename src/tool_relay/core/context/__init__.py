"""Execution context and the key-value store used by executors."""

from .context import ExecutionContext, DEFAULT_CODE_RUNNER_URL
from .kv_store import KVStore, InMemoryKVStore

__all__ = ["ExecutionContext", "DEFAULT_CODE_RUNNER_URL", "KVStore", "InMemoryKVStore"]
