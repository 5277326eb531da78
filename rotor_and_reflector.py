# rotor_and_reflector.py
from __future__ import annotations

from collections.abc import Sequence

from debug import Debug
from errors import InvalidReflectorError
from permutation import ALPHABET, SIZE, Permutation, as_permutation, symbolic, to_signal

debug = Debug()
debug.disable("rotor", "reflector")


class Rotor:
    """Wiring plus a rotating offset.

    The rotor starts with its window on the notch. Only ``position`` changes
    after construction; ``notch`` is the position the rotor must step *onto*
    for the next rotor in the chain to advance (see ``machine.step_positions``).
    """

    def __init__(
        self,
        wiring: Permutation | str | Sequence[str | int],
        notch: int | str,
    ) -> None:
        self.wiring: Permutation = as_permutation(wiring)
        self.notch: int = to_signal(notch)
        self.position: int = self.notch

    # ── stepping --------------------------------------------------
    def step(self) -> int:
        self.position = (self.position + 1) % SIZE
        return self.position

    def set_position(self, position: int | str) -> "Rotor":
        self.position = to_signal(position)
        return self

    @property
    def window(self) -> str:
        return ALPHABET[self.position]

    # ── signal paths ---------------------------------------------
    # The contact under signal `sig` is wiring entry sig+position; the
    # result is taken back into the fixed frame, so at any fixed position
    # reverse() undoes forward() exactly.
    @symbolic
    def forward(self, sig: int) -> int:
        shifted = (sig + self.position) % SIZE
        mapped = self.wiring.forward(shifted)
        out = (mapped - self.position) % SIZE
        debug.log("rotor", f"fwd pos={self.position} {sig}->{out}")
        return out

    @symbolic
    def reverse(self, sig: int) -> int:
        shifted = (sig + self.position) % SIZE
        mapped = self.wiring.inverse(shifted)
        out = (mapped - self.position) % SIZE
        debug.log("rotor", f"rev pos={self.position} {sig}->{out}")
        return out

    backward = reverse

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return f"<Rotor pos={self.position} notch={self.notch}>"


class Reflector:
    def __init__(self, wiring: Permutation | str | Sequence[str | int]) -> None:
        perm = as_permutation(wiring)

        # w[w[i]] == i and no self-maps
        if not perm.is_involution():
            raise InvalidReflectorError("Reflector wiring must be an involution")
        fixed = perm.fixed_points()
        if fixed:
            letters = "".join(ALPHABET[i] for i in fixed)
            raise InvalidReflectorError(
                f"Reflector wiring must have no fixed points (got {letters})"
            )

        self.wiring: Permutation = perm

    @symbolic
    def transform(self, sig: int) -> int:
        out = self.wiring.forward(sig)
        debug.log("reflector", f"{sig}->{out}")
        return out

    reflect = transform

    def __repr__(self) -> str:
        return f"<Reflector {self.wiring.wiring}>"
