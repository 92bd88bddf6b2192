"""Environment-driven settings for the relay."""

import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field

from .context import DEFAULT_CODE_RUNNER_URL, ExecutionContext
from .logger import get_logger

logger = get_logger(__name__)


class RelaySettings(BaseModel):
    """
    Settings for talking to the remote agent and executing tools locally.

    Attributes:
        agent_url: Endpoint of the remote agent.
        api_key: Bearer credential for the agent endpoint.
        code_runner_api_key: Credential for the sandboxed code-execution service.
        code_runner_url: Base URL of the code-execution service.
        working_directory: Root for all relative tool paths.
        request_timeout: Timeout in seconds for requests to the agent.
        max_rounds: Maximum number of tool batches handled in one user turn.
    """

    agent_url: str = "http://127.0.0.1:3500"
    api_key: Optional[str] = None
    code_runner_api_key: Optional[str] = None
    code_runner_url: str = DEFAULT_CODE_RUNNER_URL
    working_directory: Path = Field(default_factory=Path.cwd)
    request_timeout: float = Field(default=30.0, gt=0)
    max_rounds: int = Field(default=5, ge=1)

    @classmethod
    def from_env(cls, env_file: Optional[str | Path] = None) -> "RelaySettings":
        """Load a ``.env`` file (if any) and build settings from the environment.

        Args:
            env_file: Explicit dotenv path. If None, the nearest ``.env`` is used.

        Returns:
            The validated settings.
        """
        path = str(env_file) if env_file else find_dotenv(usecwd=True)
        if path:
            logger.debug("Loading environment from %s", path)
            load_dotenv(path)

        values = {
            "agent_url": os.getenv("AGENT_URL"),
            "api_key": os.getenv("API_KEY"),
            "code_runner_api_key": os.getenv("RIZA_API_KEY"),
            "code_runner_url": os.getenv("RIZA_BASE_URL"),
            "working_directory": os.getenv("TOOL_RELAY_WORKDIR"),
            "request_timeout": os.getenv("TOOL_RELAY_REQUEST_TIMEOUT"),
            "max_rounds": os.getenv("TOOL_RELAY_MAX_ROUNDS"),
        }
        return cls(**{k: v for k, v in values.items() if v})

    def build_context(self, **overrides) -> ExecutionContext:
        """Create an ExecutionContext rooted at the configured working directory."""
        params = {
            "working_directory": self.working_directory,
            "code_runner_api_key": self.code_runner_api_key,
            "code_runner_url": self.code_runner_url,
        }
        params.update(overrides)
        return ExecutionContext(**params)
