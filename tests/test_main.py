import json

import pytest

from main import CipherPipeline, Config, MachineContext, load_config, main

from conftest import WIRING_I

REFERENCE = {
    "rotors": ["I", "II", "III"],
    "reflector": "B",
    "plugs": ["AZ", "BY"],
    "notch_map": {"I": 17, "II": 5, "III": 22},
}


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "enigma_config.json"
    path.write_text(json.dumps(REFERENCE))
    return path


def test_load_config_requires_keys(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"rotors": ["I"]}))
    with pytest.raises(ValueError, match="reflector"):
        load_config(path)
    path.write_text(json.dumps({"rotors": [], "reflector": "B"}))
    with pytest.raises(ValueError, match="no rotors"):
        load_config(path)


@pytest.mark.parametrize(
    "payload, message",
    [
        ({"rotors": [1], "reflector": "B"}, "list of names"),
        ({"rotors": "I II", "reflector": "B"}, "list of names"),
        ({"rotors": ["I"], "reflector": 2}, "reflector must be a name"),
        ({"rotors": ["I"], "reflector": "B", "notch_map": [1]}, "notch_map"),
    ],
)
def test_load_config_rejects_malformed_entries(tmp_path, payload, message):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps(payload))
    with pytest.raises(ValueError, match=message):
        load_config(path)


def test_load_config_resolves_relative_wheels(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps({"rotors": ["I"], "reflector": "B", "wheels": "w.json"}))
    assert load_config(path)["wheels"] == str(tmp_path / "w.json")


def test_context_starts_on_notches_by_default():
    ctx = MachineContext.from_config(REFERENCE)
    assert ctx.start == [17, 5, 22]
    assert ctx.machine.pb.pairs() == ["AZ", "BY"]


def test_context_start_positions_and_rewind():
    ctx = MachineContext.from_config({**REFERENCE, "positions": "ABC"})
    assert ctx.start == [0, 1, 2]
    ctx.machine.encrypt("HELLO")
    ctx.rewind()
    assert ctx.machine.get_positions() == [0, 1, 2]


def test_context_uses_wheel_table(tmp_path):
    wheels = tmp_path / "w.json"
    wheels.write_text(json.dumps({"rotors": {"L1": {"wiring": WIRING_I, "notch": 9}}}))
    ctx = MachineContext.from_config({"rotors": ["L1", "II"], "reflector": "C", "wheels": str(wheels)})
    assert ctx.machine.notches == [9, 4]


def test_pipeline_round_trip_with_passthrough():
    crypto = CipherPipeline(MachineContext.from_config(REFERENCE))
    cipher = crypto.encrypt("Hello, Enigma 1939!")
    assert cipher[5:7] == ", "
    assert cipher[-6:] == " 1939!"
    assert crypto.decrypt(cipher) == "HELLO, ENIGMA 1939!"


def test_passthrough_does_not_step():
    ctx = MachineContext.from_config(REFERENCE)
    crypto = CipherPipeline(ctx)
    assert crypto.encrypt("H E")[0] == crypto.encrypt("HE")[0]
    assert crypto.encrypt("H E")[2] == crypto.encrypt("HE")[1]


def test_pipeline_strip_mode():
    crypto = CipherPipeline(MachineContext.from_config(REFERENCE), Config(passthrough=False))
    cipher = crypto.encrypt("hello enigma")
    assert len(cipher) == len("HELLOENIGMA")
    assert crypto.decrypt(cipher) == "HELLOENIGMA"


def test_pipeline_without_uppercase_passes_lowercase():
    crypto = CipherPipeline(MachineContext.from_config(REFERENCE), Config(uppercase=False))
    assert crypto.encrypt("abc") == "abc"


def test_pipeline_strict_block_rejects_foreign_chars():
    ctx = MachineContext.from_config(REFERENCE)
    with pytest.raises(ValueError):
        ctx.encipher_block("AB C", passthrough=False)


def test_display_grouping():
    crypto = CipherPipeline(MachineContext.from_config(REFERENCE), Config(block=5))
    assert crypto.display("ABCDEFGHIJKL") == "ABCDE FGHIJ KL"


def test_turnover_defaults_to_arrival():
    ctx = MachineContext.from_config(REFERENCE)
    CipherPipeline(ctx)
    assert ctx.machine.on_arrival is True


def test_turnover_switch_reaches_machine():
    ctx = MachineContext.from_config(REFERENCE)
    CipherPipeline(ctx, Config(turnover_on_arrival=False))
    assert ctx.machine.on_arrival is False


# ── CLI ───────────────────────────────────────────────────────────

def test_cli_one_shot(config_file, capsys):
    main(["-m", "HELLOENIGMA"])
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("Encrypted: ")
    assert out[1] == "Decrypted: HELLOENIGMA"


def test_cli_decrypt_mode(config_file, capsys):
    main(["-m", "HELLOENIGMA"])
    cipher = capsys.readouterr().out.splitlines()[0].removeprefix("Encrypted: ")
    main(["--decrypt", "-m", cipher])
    assert capsys.readouterr().out.strip() == "Decrypted: HELLOENIGMA"


def test_cli_explicit_config_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit, match="Failed to load configuration"):
        main(["--config", "nope.json", "-m", "X"])


def test_cli_bad_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({**REFERENCE, "plugs": ["AB", "BC"]}))
    with pytest.raises(SystemExit, match="already used"):
        main(["--config", str(path), "-m", "X"])


def test_cli_interactive_repl(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    answers = iter(["I II III", "B", "AZ BY", "", "attack at dawn", ""])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    main(["--block", "5"])
    out = capsys.readouterr().out
    assert "Decrypted: ATTACK AT DAWN" in out
    assert "window RFW" in out


def test_cli_debug_flag_enables_component(config_file):
    from debug import Debug

    main(["--debug", "stepping", "-m", "A"])
    assert Debug().status()["stepping"] is True


def test_cli_malformed_rotor_names(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "odd.json"
    path.write_text(json.dumps({"rotors": [1], "reflector": "B"}))
    with pytest.raises(SystemExit, match="list of names"):
        main(["--config", str(path), "-m", "X"])


def test_cli_turnover_on_leave(config_file, capsys):
    main(["-m", "HELLOENIGMA"])
    arrival = capsys.readouterr().out.splitlines()[0]
    main(["--turnover-on-leave", "-m", "HELLOENIGMA"])
    leave = capsys.readouterr().out.splitlines()
    assert leave[0] != arrival
    assert leave[1] == "Decrypted: HELLOENIGMA"
