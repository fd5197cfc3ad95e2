"""Conversation replay sanitation."""

from loomgate.replay.sanitizer import has_following_non_thinking_block, is_thinking_block, sanitize_replay
from loomgate.replay.signature import ReasoningSignature, parse_reasoning_signature

__all__ = [
    "ReasoningSignature",
    "has_following_non_thinking_block",
    "is_thinking_block",
    "parse_reasoning_signature",
    "sanitize_replay",
]
