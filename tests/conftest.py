import pytest

from debug import Debug
from keyboard_and_plugboard import Plugboard
from machine import Machine
from rotor_and_reflector import Reflector, Rotor

WIRING_I = "EKMFLGDQVZNTOWYHXUSPAIBRCJ"
WIRING_II = "AJDKSIRUXBLHWTMCQGZNPYFVOE"
WIRING_III = "BDFHJLCPRTXVZNYEIWGAKMUSQO"
REFLECTOR_B = "YRUHQSLDPXNGOKMIEBFZCWVJAT"


@pytest.fixture(autouse=True)
def quiet_debug():
    saved = Debug._components.copy()
    yield
    Debug._components.clear()
    Debug._components.update(saved)


@pytest.fixture
def reference_machine():
    """Three-rotor machine started on the notches 17, 5, 22."""
    rotors = [
        Rotor(WIRING_I, 17),
        Rotor(WIRING_II, 5),
        Rotor(WIRING_III, 22),
    ]
    return Machine(rotors, Reflector(REFLECTOR_B), Plugboard(["AZ", "BY"]))
