import asyncio
import uuid

from tool_relay import AgentClient, ContinuationHandler, RelaySettings, ToolProxy, setup_logging
from tool_relay.core.exceptions import ContinuationError


async def main() -> None:
    """
    Minimal interactive session: user turns go to the agent, tool calls run locally.
    """
    setup_logging()
    settings = RelaySettings.from_env()

    if not settings.api_key:
        print("Error: API_KEY not found in environment variables.")
        return

    session_id = f"cli-{uuid.uuid4().hex[:12]}"
    proxy = ToolProxy(settings.build_context(session_id=session_id))
    handler = ContinuationHandler(proxy, timeout=settings.request_timeout)

    print(f"Connected to {settings.agent_url} (session {session_id})")
    print(f"Tools run in {settings.working_directory}")
    print("\nStart chatting! Type 'exit' or 'quit' to stop.")

    async with AgentClient(settings.agent_url, settings.api_key, timeout=settings.request_timeout) as client:
        while True:
            user_input = input("\nYou: ").strip()
            if user_input.lower() in ["exit", "quit"]:
                print("Goodbye!")
                break

            if not user_input:
                continue

            try:
                turn = await handler.run_turn(user_input, client, session_id, max_rounds=settings.max_rounds)
            except ContinuationError as e:
                print(f"An error occurred: {e}")
                continue

            print(f"Agent: {turn.text}")
            if turn.exhausted:
                print("(Stopped after the maximum number of tool rounds.)")


if __name__ == "__main__":
    asyncio.run(main())
