"""Exceptions raised by the core."""

from __future__ import annotations


class InvariantViolation(RuntimeError):
    """Internal-consistency fault: the board reached a state that correct
    initialisation and move execution can never produce."""
