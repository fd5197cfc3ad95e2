"""Replay sanitation for provider reasoning blocks.

The provider rejects a replayed reasoning item unless it is followed by
other content from the same assistant turn. Reasoning blocks that carry a
provider signature and end their message are therefore orphaned and must be
dropped before the history is sent again. Blocks without a recognizable
signature are not provider-bound and are left alone.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, TypeGuard

from loguru import logger

from loomgate.replay.signature import parse_reasoning_signature

THINKING_BLOCK_TYPE = "thinking"
# Stored history uses ``thinkingSignature``; ``signature`` is accepted as a fallback.
SIGNATURE_KEYS = ("thinkingSignature", "signature")


def is_thinking_block(block: object) -> TypeGuard[Mapping[str, Any]]:
    return isinstance(block, Mapping) and block.get("type") == THINKING_BLOCK_TYPE


def signature_of(block: Mapping[str, Any]) -> object:
    for key in SIGNATURE_KEYS:
        value = block.get(key)
        if value:
            return value
    return None


def has_following_non_thinking_block(content: Sequence[object], index: int) -> bool:
    """Return whether any block after ``index`` is something other than thinking.

    Blocks that are not mappings count as content.
    """
    return any(not is_thinking_block(block) for block in content[index + 1 :])


def _filter_content(content: Sequence[object]) -> list[object] | None:
    """Return the kept blocks, or ``None`` when nothing was dropped."""

    kept: list[object] = []
    changed = False
    for index, block in enumerate(content):
        if not is_thinking_block(block):
            kept.append(block)
            continue
        if parse_reasoning_signature(signature_of(block)) is None:
            kept.append(block)
            continue
        if has_following_non_thinking_block(content, index):
            kept.append(block)
            continue
        changed = True
    return kept if changed else None


def sanitize_replay(messages: Iterable[Any]) -> list[Any]:
    """Drop orphaned signed reasoning blocks from assistant messages.

    Messages that need no change are returned as the same objects. Assistant
    messages left with no content are removed from the result. The input is
    never mutated.
    """
    out: list[Any] = []
    dropped_blocks = 0
    dropped_messages = 0

    for message in messages:
        if not isinstance(message, Mapping) or message.get("role") != "assistant":
            out.append(message)
            continue

        content = message.get("content")
        if not isinstance(content, (list, tuple)):
            out.append(message)
            continue

        kept = _filter_content(content)
        if kept is None:
            out.append(message)
            continue

        dropped_blocks += len(content) - len(kept)
        if not kept:
            dropped_messages += 1
            continue
        out.append({**message, "content": kept})

    if dropped_blocks:
        logger.debug(
            "replay.sanitize dropped_blocks={} dropped_messages={}",
            dropped_blocks,
            dropped_messages,
        )
    return out
