# errors.py
from __future__ import annotations


class InvalidWiringError(ValueError):
    """Wiring table is not a bijection over the alphabet."""


class InvalidReflectorError(InvalidWiringError):
    """Reflector wiring is not an involution without fixed points."""


class InvalidPlugboardError(ValueError):
    """Plug pairs overlap, self-pair, or leave the alphabet."""
