import typing

import pytest

import notemaker.errors
import notemaker.scales


def test_semitone_profile_starts_on_root () -> None:

	"""Every built-in scale's profile starts at 0 and has one entry per step."""

	for name, steps in notemaker.scales.SCALE_INTERVALS.items():
		profile = notemaker.scales.to_semitone_profile(steps)

		assert profile[0] == 0, name
		assert len(profile) == len(steps), name


def test_major_profile () -> None:

	"""Major steps turn into the familiar offsets, without the closing octave."""

	assert notemaker.scales.to_semitone_profile([2, 2, 1, 2, 2, 2, 1]) == [0, 2, 4, 5, 7, 9, 11]


def test_octave_repeating_scales_are_periodic () -> None:

	"""Scales whose steps sum to 12 repeat every octave with one pitch per degree."""

	for name, steps in notemaker.scales.SCALE_INTERVALS.items():

		if sum(steps) != 12:
			continue

		notes = notemaker.scales.expand_scale(60, steps)

		for pitch in notes:
			if pitch + 12 <= 127:
				assert pitch + 12 in notes, name

		assert len([p for p in notes if 60 <= p < 72]) == len(steps), name


def test_major_expansion_covers_midi_range (c_major_notes: typing.List[int]) -> None:

	"""C major starts on MIDI 0 and has seven notes per octave."""

	assert c_major_notes[:8] == [0, 2, 4, 5, 7, 9, 11, 12]
	assert c_major_notes[-1] == 127
	assert len([p for p in c_major_notes if 48 <= p < 60]) == 7


def test_non_repeating_scale_walks_both_ways () -> None:

	"""A scale that does not close on the octave is walked up and down from its root."""

	notes = notemaker.scales.expand_scale(60, [3, 4], midi_floor=50, midi_ceil=80)

	assert notes == [53, 56, 60, 63, 67, 70, 74, 77]


def test_expand_scale_limits () -> None:

	"""Floor and ceiling are inclusive."""

	notes = notemaker.scales.expand_scale(60, [2, 2, 1, 2, 2, 2, 1], midi_floor=60, midi_ceil=72)

	assert notes == [60, 62, 64, 65, 67, 69, 71, 72]


def test_inverted_range_raises () -> None:

	with pytest.raises(notemaker.errors.InvalidParameterError):
		notemaker.scales.expand_scale(60, [2, 2, 1, 2, 2, 2, 1], midi_floor=80, midi_ceil=40)


def test_invalid_steps_raise () -> None:

	"""Empty step lists and non-positive steps are rejected."""

	with pytest.raises(notemaker.errors.InvalidScaleError):
		notemaker.scales.expand_scale(60, [])

	with pytest.raises(notemaker.errors.InvalidScaleError):
		notemaker.scales.to_semitone_profile([2, 0, 3])


def test_unknown_scale_raises () -> None:

	with pytest.raises(notemaker.errors.InvalidScaleError):
		notemaker.scales.get_intervals("Not A Scale")


def test_register_scale (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Registered scales can be looked up by name."""

	monkeypatch.setattr(notemaker.scales, "SCALE_INTERVALS", dict(notemaker.scales.SCALE_INTERVALS))

	notemaker.scales.register_scale("Kumoi", [2, 1, 4, 2, 3])

	assert notemaker.scales.get_intervals("Kumoi") == [2, 1, 4, 2, 3]


def test_key_names () -> None:

	assert notemaker.scales.key_name_to_pc("C") == 0
	assert notemaker.scales.key_name_to_pc("Bb") == 10

	with pytest.raises(notemaker.errors.InvalidParameterError):
		notemaker.scales.key_name_to_pc("H")


def test_scale_tone_wraps_octaves () -> None:

	"""Indices past the last degree climb into the next octave; negative ones descend."""

	profile = [0, 2, 4, 5, 7, 9, 11]

	assert notemaker.scales.scale_tone(60, profile, 9) == 64
	assert notemaker.scales.scale_tone(60, profile, -1) == 59


def test_build_scale_notes () -> None:

	assert notemaker.scales.build_scale_notes(60, [0, 2, 4, 5, 7, 9, 11], 1) == [60, 62, 64, 65, 67, 69, 71, 72]


def test_closest_lower_and_higher () -> None:

	assert notemaker.scales.closest_lower_and_higher(62, [60, 62, 64]) == (62, 62)
	assert notemaker.scales.closest_lower_and_higher(63, [60, 62, 64]) == (62, 64)
	assert notemaker.scales.closest_lower_and_higher(70, [60, 62, 64]) == (64, None)
	assert notemaker.scales.closest_lower_and_higher(50, [60, 62, 64]) == (None, 60)


def test_nearest_scale_note_ties_resolve_down () -> None:

	"""A pitch exactly between two scale notes snaps to the lower one."""

	assert notemaker.scales.nearest_scale_note(61, [60, 62, 64]) == 60
	assert notemaker.scales.nearest_scale_note(63, [60, 62, 64]) == 62
	assert notemaker.scales.nearest_scale_note(59, [60, 62, 64]) == 60
	assert notemaker.scales.nearest_scale_note(70, [60, 62, 64]) == 64


def test_scale_note_stack (major: typing.List[int]) -> None:

	"""The note stack holds every scale pitch, muted, on the first step."""

	stack = notemaker.scales.scale_note_stack(60, major)

	assert [note.pitch for note in stack] == notemaker.scales.expand_scale(60, major)
	assert all(note.muted for note in stack)
	assert all(note.position == 0 for note in stack)
	assert all(note.length == 0.25 for note in stack)
