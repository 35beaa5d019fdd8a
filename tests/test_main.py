import os
import pathlib

import mido
import pytest

import notemaker.__main__


CONFIG = """
key: D
scale: Dorian
chords:
  length: 4
  add_seventh: true
  revoice: true
  min_interval: 2
  pedal_role: fifth
melody:
  bars: 2
  motif_chance: 20
text:
  gap: 2
output:
  bpm: 96
"""


@pytest.fixture
def config_path (tmp_path: pathlib.Path) -> str:

	path = os.path.join(str(tmp_path), "notemaker.yaml")

	with open(path, "w") as f:
		f.write(CONFIG)

	return path


@pytest.mark.parametrize("command", [["chords"], ["melody"], ["text", "Hi"], ["stack"]])
def test_commands_write_midi (config_path: str, tmp_path: pathlib.Path, command: list) -> None:

	"""Every command writes a readable MIDI file at the configured tempo."""

	output = os.path.join(str(tmp_path), "out.mid")

	assert notemaker.__main__.main(["--config", config_path, "--output", output, "--seed", "1"] + command) == 0

	mid = mido.MidiFile(output)
	tempo = [m for m in mid.tracks[0] if m.type == "set_tempo"][0]

	assert tempo.tempo == mido.bpm2tempo(96)


def test_chords_from_config_have_sevenths (config_path: str, tmp_path: pathlib.Path) -> None:

	output = os.path.join(str(tmp_path), "chords.mid")
	notemaker.__main__.main(["--config", config_path, "--output", output, "--seed", "3", "chords"])

	note_ons = [m for m in mido.MidiFile(output).tracks[0] if m.type == "note_on"]

	assert len(note_ons) == 16


def test_missing_config_uses_defaults (tmp_path: pathlib.Path) -> None:

	assert notemaker.__main__.load_config(os.path.join(str(tmp_path), "missing.yaml")) == {}


def test_invalid_settings_exit_code (tmp_path: pathlib.Path) -> None:

	path = os.path.join(str(tmp_path), "bad.yaml")

	with open(path, "w") as f:
		f.write("scale: Nope\n")

	assert notemaker.__main__.main(["--config", path, "--output", os.path.join(str(tmp_path), "x.mid"), "chords"]) == 2
