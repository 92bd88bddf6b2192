"""HTTP transport to the remote agent endpoint."""

from typing import Dict, Optional

import httpx

from ..core.exceptions import (
    ContinuationError,
    ContinuationHTTPError,
    ContinuationTimeoutError,
    RateLimitError,
)
from ..core.logger import get_logger
from ..core.messages import ContinuationRequest
from .codec import encode_continuation

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0
_BODY_LOG_LIMIT = 2000


class AgentClient:
    """
    Sends user turns and continuation requests to the agent and returns the response bodies.

    Errors are classified into the ContinuationError hierarchy. Nothing is retried:
    a repeated continuation would execute the agent's next step twice.
    """

    def __init__(
        self,
        endpoint: str,
        credential: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize the client.

        Args:
            endpoint: URL of the agent.
            credential: Bearer token for the agent.
            timeout: Seconds to wait for a complete response.
            client: Optional shared httpx client. If omitted, the AgentClient owns one and closes it in ``aclose``.
        """
        self.endpoint = endpoint
        self._credential = credential
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def __aenter__(self) -> "AgentClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self, session_id: str, content_type: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._credential}",
            "x-session-id": session_id,
            "Content-Type": content_type,
        }

    async def send_message(self, text: str, session_id: str) -> str:
        """Send a plain-text user turn.

        Returns:
            The full response body.
        """
        return await self._post(text, session_id, "text/plain")

    async def send_continuation(self, request: ContinuationRequest) -> str:
        """Send tool results back to the agent.

        Returns:
            The full response body of the agent's follow-up.

        Raises:
            ContinuationTimeoutError: If no complete response arrived within the timeout.
            RateLimitError: If the agent answered 429.
            ContinuationHTTPError: For any other non-2xx status.
            ContinuationError: For connection-level failures.
        """
        logger.info(f"Sending {len(request.tool_results)} tool result(s) back to agent")
        return await self._post(encode_continuation(request), request.session_id, "application/json")

    async def _post(self, body: str, session_id: str, content_type: str) -> str:
        try:
            response = await self._client.post(
                self.endpoint,
                content=body.encode("utf-8"),
                headers=self._headers(session_id, content_type),
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            logger.error(f"Request to {self.endpoint} timed out after {self.timeout:g} seconds")
            raise ContinuationTimeoutError(f"Request timed out after {self.timeout:g} seconds") from exc
        except httpx.HTTPError as exc:
            logger.error(f"Request to {self.endpoint} failed: {exc} (body length: {len(body)} chars)")
            raise ContinuationError(f"Request to agent failed: {exc}") from exc

        if response.is_success:
            return response.text

        status = response.status_code
        text = response.text
        logger.error(f"HTTP Error: {status} {response.reason_phrase}")
        logger.error(f"Response body: {text[:_BODY_LOG_LIMIT]}")

        if status == 429:
            raise RateLimitError(
                "Rate limit exceeded. Wait a moment before trying again, or make smaller requests.",
                status_code=status,
                body=text,
            )
        raise ContinuationHTTPError(f"HTTP {status}: {response.reason_phrase}", status_code=status, body=text)
