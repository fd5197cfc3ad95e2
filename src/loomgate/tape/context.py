"""Tape context that prepares replay history for provider requests."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from republic import TapeContext, TapeEntry

from loomgate.replay import sanitize_replay


def default_tape_context(state: dict[str, Any] | None = None) -> TapeContext:
    """Return the context selection used when building provider requests."""

    return TapeContext(select=select_replay_messages, state=state or {})


def select_replay_messages(entries: Iterable[TapeEntry], _context: TapeContext) -> list[dict[str, Any]]:
    """Rebuild chat messages from tape entries and sanitize them for replay."""

    messages: list[dict[str, Any]] = []
    call_message: dict[str, Any] | None = None

    for entry in entries:
        if entry.kind == "message":
            if isinstance(entry.payload, dict):
                messages.append(dict(entry.payload))
        elif entry.kind == "tool_call":
            calls = _tool_calls_of(entry.payload)
            call_message = {"role": "assistant", "content": "", "tool_calls": calls} if calls else None
            if call_message is not None:
                messages.append(call_message)
        elif entry.kind == "tool_result":
            if call_message is not None:
                _pair_tool_results(messages, call_message, entry.payload.get("results"))
            call_message = None

    return sanitize_replay(messages)


def _tool_calls_of(payload: dict[str, Any]) -> list[dict[str, Any]]:
    calls = payload.get("calls")
    if not isinstance(calls, list):
        return []
    normalized = (_normalize_tool_call(call) for call in calls)
    return [call for call in normalized if call is not None]


def _normalize_tool_call(call: object) -> dict[str, Any] | None:
    """Return a replayable copy of ``call``, or ``None`` when it has no name or arguments."""

    if not isinstance(call, dict):
        return None
    function = call.get("function")
    if not isinstance(function, dict):
        return None
    name = function.get("name")
    if not isinstance(name, str) or not name:
        return None

    arguments = function.get("arguments")
    if isinstance(arguments, dict):
        arguments = json.dumps(arguments, ensure_ascii=False)
    if not isinstance(arguments, str) or not arguments.strip():
        return None
    return {**call, "function": {**function, "arguments": arguments}}


def _pair_tool_results(messages: list[dict[str, Any]], call_message: dict[str, Any], results: object) -> None:
    # Every replayed tool call has a matching tool reply.
    calls: list[dict[str, Any]] = call_message["tool_calls"]
    paired = list(zip(calls, results, strict=False)) if isinstance(results, list) else []
    if not paired:
        messages[:] = [message for message in messages if message is not call_message]
        return
    if len(paired) < len(calls):
        call_message["tool_calls"] = calls[: len(paired)]
    for call, result in paired:
        messages.append(_tool_result_message(call, result))


def _tool_result_message(call: dict[str, Any], result: object) -> dict[str, Any]:
    message: dict[str, Any] = {"role": "tool", "content": _render_tool_result(result)}
    call_id = call.get("id")
    if isinstance(call_id, str) and call_id:
        message["tool_call_id"] = call_id
    message["name"] = call["function"]["name"]
    return message


def _render_tool_result(result: object) -> str:
    if isinstance(result, str):
        return result
    try:
        return json.dumps(result, ensure_ascii=False)
    except TypeError:
        return str(result)
