# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Sequence

from debug import Debug
from keyboard_and_plugboard import Keyboard, Plugboard
from permutation import ALPHABET, SIZE, to_signal
from rotor_and_reflector import Reflector, Rotor

debug = Debug()
debug.disable("stepping", "encipher")


# ── stepping logic  ─────────────────────────────────────────────

def step_positions(
    positions: Sequence[int],
    notches: Sequence[int],
    *,
    on_arrival: bool = True,
) -> tuple[int, ...]:
    """Return the position vector after one key-press.

    Rotor 0 always steps. Each stepped rotor carries into the next one when
    its new position is its notch (``on_arrival=True``) or when it has just
    left it (``on_arrival=False``); the cascade halts at the first rotor
    that does not carry.
    """
    if len(positions) != len(notches):
        raise ValueError("positions / notches length mismatch")

    new = list(positions)
    for i, notch in enumerate(notches):
        old = new[i]
        new[i] = (old + 1) % SIZE
        carry = new[i] == notch if on_arrival else old == notch
        if not carry:
            break
    return tuple(new)


class Machine:
    def __init__(
        self,
        rotors: Sequence[Rotor],
        reflector: Reflector,
        plugboard: Plugboard | None = None,
        *,
        keyboard: Keyboard | None = None,
        on_arrival: bool = True,
    ) -> None:
        if not rotors:
            raise ValueError("Machine needs at least one rotor")
        if len({id(r) for r in rotors}) != len(rotors):
            raise ValueError("The same Rotor object appears twice in the stack")

        self.kb         = keyboard or Keyboard()
        self.pb         = plugboard if plugboard is not None else Plugboard()
        self.rotors     = list(rotors)    # rotors[0] is the fast rotor
        self.reflector  = reflector
        self.on_arrival = on_arrival

    # ── position vector ─────────────────────────────────────────

    def get_positions(self) -> list[int]:
        return [rotor.position for rotor in self.rotors]

    def set_positions(self, positions: Sequence[int | str] | str) -> None:
        """Restore a position vector; ``"QEV"`` or ``[16, 4, 21]``."""
        if len(positions) != len(self.rotors):
            raise ValueError(
                f"Need {len(self.rotors)} positions, got {len(positions)}"
            )
        signals = [to_signal(p) for p in positions]
        for rotor, sig in zip(self.rotors, signals):
            rotor.position = sig

    @property
    def notches(self) -> list[int]:
        return [rotor.notch for rotor in self.rotors]

    @property
    def window(self) -> str:
        return "".join(ALPHABET[p] for p in self.get_positions())

    def _step_rotors(self) -> None:
        new = step_positions(
            self.get_positions(), self.notches, on_arrival=self.on_arrival
        )
        for rotor, pos in zip(self.rotors, new):
            rotor.position = pos
        debug.log("stepping", f"Rotor pos {list(new)}")

    # ── encipher one symbol  ────────────────────────────────────

    def encrypt_char(self, c: str | int) -> str | int:
        """Encipher one letter (or signal) and advance the rotors."""
        as_letter = isinstance(c, str)
        signal = self.kb.forward(c) if as_letter else to_signal(c)
        start = signal

        signal = self.pb.swap(signal)

        for rotor in self.rotors:
            signal = rotor.forward(signal)

        signal = self.reflector.transform(signal)

        for rotor in reversed(self.rotors):
            signal = rotor.reverse(signal)

        signal = self.pb.swap(signal)

        debug.log("encipher", f"{ALPHABET[start]}->{ALPHABET[signal]} @ {self.window}")
        self._step_rotors()
        return self.kb.backward(signal) if as_letter else signal

    def encrypt(self, text: str) -> str:
        """Encipher a string of alphabet letters, one key-press each."""
        return "".join(self.encrypt_char(ch) for ch in text)

    def __repr__(self) -> str:
        return f"<Machine window={self.window} rotors={len(self.rotors)} {self.pb!r}>"
