"""Tape helpers for provider replay."""

from loomgate.tape.context import default_tape_context, select_replay_messages

__all__ = ["default_tape_context", "select_replay_messages"]
