import pytest

from errors import InvalidReflectorError, InvalidWiringError
from permutation import ALPHABET, Permutation
from rotor_and_reflector import Reflector, Rotor

from conftest import REFLECTOR_B, WIRING_I, WIRING_III


# ── Rotor ─────────────────────────────────────────────────────────

def test_rotor_starts_on_its_notch():
    rotor = Rotor(WIRING_I, 17)
    assert rotor.position == 17
    assert rotor.notch == 17
    assert Rotor(WIRING_I, "Q").notch == 16


def test_rotor_accepts_permutation_instance():
    perm = Permutation(WIRING_III)
    assert Rotor(perm, 0).wiring is perm


def test_rotor_rejects_bad_wiring_and_notch():
    with pytest.raises(InvalidWiringError):
        Rotor("ABC", 0)
    with pytest.raises(ValueError):
        Rotor(WIRING_I, 26)


@pytest.mark.parametrize("position", range(26))
def test_reverse_undoes_forward_at_every_position(position):
    rotor = Rotor(WIRING_I, 0).set_position(position)
    for x in range(26):
        assert rotor.reverse(rotor.forward(x)) == x
        assert rotor.forward(rotor.reverse(x)) == x


def test_forward_at_position_zero_is_plain_wiring():
    rotor = Rotor(WIRING_I, 0)
    assert "".join(rotor.forward(c) for c in ALPHABET) == WIRING_I


def test_forward_shifts_contacts_with_position():
    rotor = Rotor(WIRING_I, 0).set_position(1)
    # contact B (K) seen from A, taken back one place → J
    assert rotor.forward("A") == "J"


def test_step_wraps():
    rotor = Rotor(WIRING_I, 24)
    assert rotor.step() == 25
    assert rotor.step() == 0
    assert rotor.position == 0
    assert rotor.window == "A"


def test_backward_alias():
    rotor = Rotor(WIRING_I, 3)
    assert rotor.backward(7) == rotor.reverse(7)


# ── Reflector ─────────────────────────────────────────────────────

def test_reflector_is_fixed_point_free_involution():
    refl = Reflector(REFLECTOR_B)
    for x in range(26):
        assert refl.transform(refl.transform(x)) == x
        assert refl.transform(x) != x


def test_reflector_letters():
    refl = Reflector(REFLECTOR_B)
    assert refl.transform("A") == "Y"
    assert refl.reflect("Y") == "A"


def test_reflector_rejects_non_involution():
    with pytest.raises(InvalidReflectorError):
        Reflector(WIRING_I)


def test_reflector_rejects_fixed_points():
    # swap A<->B, everything else maps to itself
    with pytest.raises(InvalidReflectorError, match="fixed points"):
        Reflector("BA" + ALPHABET[2:])


def test_reflector_error_is_a_wiring_error():
    with pytest.raises(InvalidWiringError):
        Reflector(ALPHABET)
    with pytest.raises(InvalidWiringError):
        Reflector("ABC")
