# permutation.py
from __future__ import annotations

import functools
from collections.abc import Callable, Sequence

from errors import InvalidWiringError

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
SIZE = len(ALPHABET)


def to_signal(symbol: str | int) -> int:
    """Letter or integer symbol → integer signal 0‥25."""
    if isinstance(symbol, str):
        if len(symbol) != 1 or symbol not in ALPHABET:
            raise ValueError(f"Invalid character {symbol!r} for current alphabet.")
        return ALPHABET.index(symbol)
    if isinstance(symbol, bool) or not isinstance(symbol, int):
        raise ValueError(f"Symbol {symbol!r} is neither a letter nor a signal")
    if not (0 <= symbol < SIZE):
        raise ValueError(f"Signal {symbol} out of range 0–{SIZE - 1}")
    return symbol


def symbolic(method: Callable[[object, int], int]) -> Callable:
    """Let a signal-level method also take (and then return) letters."""

    @functools.wraps(method)
    def wrapper(self, sym):
        if isinstance(sym, str):
            return ALPHABET[method(self, to_signal(sym))]
        return method(self, sym)

    return wrapper


class Permutation:
    """Fixed bijection over the 26 symbols.

    ``table[i]`` is where signal *i* goes. The table may be given as a
    26-letter string (``"EKMF…"``) or as 26 integer signals.
    """

    __slots__ = ("_fwd", "_rev")

    def __init__(self, table: str | Sequence[str | int]) -> None:
        if len(table) != SIZE:
            raise InvalidWiringError(
                f"Wiring must have {SIZE} symbols, got {len(table)}"
            )
        try:
            fwd = tuple(to_signal(s) for s in table)
        except ValueError as exc:
            raise InvalidWiringError(f"Wiring contains a bad symbol: {exc}") from exc

        if len(set(fwd)) != SIZE:
            missing = "".join(ALPHABET[i] for i in range(SIZE) if i not in fwd)
            raise InvalidWiringError(
                f"wiring must be a permutation of alphabet (missing {missing})"
            )

        rev = [0] * SIZE
        for i, out in enumerate(fwd):
            rev[out] = i

        self._fwd: tuple[int, ...] = fwd
        self._rev: tuple[int, ...] = tuple(rev)

    # ── lookups ──────────────────────────────────────────────────
    @symbolic
    def forward(self, sig: int) -> int:
        return self._fwd[sig]

    @symbolic
    def inverse(self, sig: int) -> int:
        return self._rev[sig]

    # ── properties ───────────────────────────────────────────────
    def is_involution(self) -> bool:
        return all(self._fwd[out] == i for i, out in enumerate(self._fwd))

    def fixed_points(self) -> list[int]:
        return [i for i, out in enumerate(self._fwd) if i == out]

    @property
    def wiring(self) -> str:
        return "".join(ALPHABET[i] for i in self._fwd)

    # ── niceties ─────────────────────────────────────────────────
    def __len__(self) -> int:
        return SIZE

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Permutation):
            return NotImplemented
        return self._fwd == other._fwd

    def __hash__(self) -> int:
        return hash(self._fwd)

    def __repr__(self) -> str:
        return f"<Permutation {self.wiring}>"


def as_permutation(table: str | Sequence[str | int]) -> Permutation:
    return table if isinstance(table, Permutation) else Permutation(table)
