"""Reasoning signature parsing."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass

# Providers issue reasoning item ids with both prefixes.
REASONING_ID_PREFIXES = ("rs_", "s_")
REASONING_KIND = "reasoning"


@dataclass(frozen=True)
class ReasoningSignature:
    id: str
    kind: str


def _candidate_from(value: object) -> Mapping[str, object] | None:
    if isinstance(value, str):
        raw = value.strip()
        if not raw.startswith("{") or not raw.endswith("}"):
            return None
        try:
            parsed = json.loads(raw)
        except (ValueError, RecursionError):
            # JSONDecodeError, oversized integers, or nesting deeper than the recursion limit.
            return None
        return parsed if isinstance(parsed, dict) else None
    if isinstance(value, Mapping):
        return value
    return None


def _string_field(candidate: Mapping[str, object], key: str) -> str:
    value = candidate.get(key)
    return value if isinstance(value, str) else ""


def is_reasoning_kind(kind: str) -> bool:
    return kind == REASONING_KIND or kind.startswith(f"{REASONING_KIND}.")


def parse_reasoning_signature(value: object) -> ReasoningSignature | None:
    """Parse a stored thinking signature into a provider reasoning reference.

    The signature may be a JSON object encoded as a string or an already
    decoded mapping. Returns ``None`` for anything that is not a well-formed
    reasoning reference; never raises.
    """
    if not value:
        return None
    candidate = _candidate_from(value)
    if candidate is None:
        return None

    signature_id = _string_field(candidate, "id")
    kind = _string_field(candidate, "type")
    if not signature_id.startswith(REASONING_ID_PREFIXES):
        return None
    if not is_reasoning_kind(kind):
        return None
    return ReasoningSignature(id=signature_id, kind=kind)
