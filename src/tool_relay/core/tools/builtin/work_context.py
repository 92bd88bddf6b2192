"""Session work-context tracking stored in the context's key-value store.

The current context lives under one key and is overwritten on every write; each write
is also kept as a history entry keyed by its millisecond timestamp and a sequence number.
"""

import json
import time
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import Field

from ...context import ExecutionContext

CURRENT_KEY = "work_context_current"
HISTORY_PREFIX = "work_context_history_"
CURRENT_TTL = 3600 * 24 * 7
HISTORY_TTL = 3600 * 24 * 30
HISTORY_LIMIT = 5

NO_ACTIVE_CONTEXT = (
    "No Active Work Context\n\n"
    'No current work context is set. Use "Remember that I\'m working on [goal]" '
    "to set a context for this session."
)


def _format_time(timestamp_ms: Any) -> str:
    try:
        return datetime.fromtimestamp(float(timestamp_ms) / 1000).strftime("%Y-%m-%d %H:%M:%S")
    except (TypeError, ValueError, OverflowError, OSError):
        return "unknown"


def _describe(entry: Dict[str, Any]) -> List[str]:
    lines = [f"Goal: {entry.get('goal')}"]
    if entry.get("description"):
        lines.append(f"Description: {entry['description']}")
    if entry.get("files"):
        lines.append(f"Key Files: {', '.join(entry['files'])}")
    lines.append(f"Status: {entry.get('status')}")
    return lines


async def _free_history_key(ctx: ExecutionContext, timestamp: int) -> str:
    # Writes within the same millisecond get increasing sequence suffixes.
    seq = 0
    while True:
        key = f"{HISTORY_PREFIX}{timestamp}_{seq:03d}"
        if await ctx.kv.get(ctx.namespace, key) is None:
            return key
        seq += 1


async def set_work_context(
    ctx: ExecutionContext,
    goal: Annotated[str, Field(description="What the user is working towards")],
    description: Annotated[Optional[str], Field(description="More detail about the work")] = None,
    files: Annotated[Optional[List[str]], Field(description="Files central to the work")] = None,
    status: Annotated[
        Literal["starting", "in-progress", "testing", "complete"], Field(description="Progress of the work")
    ] = "starting",
) -> str:
    """Remember what the user is currently working on."""
    timestamp = int(time.time() * 1000)
    entry = {
        "goal": goal,
        "description": description,
        "files": files or [],
        "status": status,
        "timestamp": timestamp,
        "sessionId": ctx.session_id,
    }
    payload = json.dumps(entry)

    await ctx.kv.set(ctx.namespace, CURRENT_KEY, payload, ttl=CURRENT_TTL)
    history_key = await _free_history_key(ctx, timestamp)
    await ctx.kv.set(ctx.namespace, history_key, payload, ttl=HISTORY_TTL)
    ctx.logger.info(f"Set work context: {goal}")

    lines = ["Work Context Set Successfully", ""] + _describe(entry)
    lines.append(f"Session: {ctx.session_id}")
    return "\n".join(lines)


async def _load(ctx: ExecutionContext, key: str) -> Optional[Dict[str, Any]]:
    stored = await ctx.kv.get(ctx.namespace, key)
    if stored is None:
        return None
    try:
        entry = json.loads(stored)
    except json.JSONDecodeError:
        ctx.logger.warning(f"Ignoring corrupt work context entry: {key}")
        return None
    return entry if isinstance(entry, dict) else None


async def get_work_context(
    ctx: ExecutionContext,
    include_history: Annotated[
        bool, Field(description="Also list recent earlier work contexts", alias="includeHistory")
    ] = False,
) -> str:
    """Recall what the user is currently working on."""
    current = await _load(ctx, CURRENT_KEY)
    if current is None:
        return NO_ACTIVE_CONTEXT

    lines = ["Current Work Context", ""] + _describe(current)
    lines.append(f"Started: {_format_time(current.get('timestamp'))}")

    if include_history:
        # Keys are equal-width millisecond stamps plus sequence, so lexical order is chronological.
        keys = await ctx.kv.keys(ctx.namespace, prefix=HISTORY_PREFIX)
        recent = []
        for key in reversed(keys):
            entry = await _load(ctx, key)
            if entry is not None:
                recent.append(entry)
            if len(recent) == HISTORY_LIMIT:
                break

        lines += ["", "Recent Work History:"]
        if not recent:
            lines.append("(none)")
        for entry in recent:
            lines.append(f"- [{_format_time(entry.get('timestamp'))}] {entry.get('goal')} ({entry.get('status')})")

    return "\n".join(lines)
