import collections
import random
import typing

import notemaker.notes
import notemaker.progression
import notemaker.voicings


def _chord (degree: int, pitches: typing.List[int]) -> notemaker.notes.Chord:

	roles = [notemaker.notes.Role.ROOT, notemaker.notes.Role.THIRD, notemaker.notes.Role.FIFTH]

	return notemaker.notes.Chord(degree=degree, notes=tuple(
		notemaker.notes.Note(pitch=pitch, position=0, length=4, velocity=64, role=role)
		for pitch, role in zip(pitches, roles)
	))


def _extended (major: typing.List[int], seed: int) -> notemaker.notes.Progression:

	progression = notemaker.progression.generate_chord_progression(0, major, length=8, rng=random.Random(seed))

	return notemaker.progression.add_tenth(notemaker.progression.add_seventh(progression))


def test_voices_move_to_nearest_octave () -> None:

	"""An F major triad an octave up is pulled back next to the C major triad."""

	previous = _chord(0, [60, 64, 67])
	chord = _chord(3, [77, 81, 84])

	result = notemaker.voicings.revoice_chord(chord, previous)

	assert result.pitches() == [65, 69, 60]


def test_first_chord_is_untouched (major: typing.List[int]) -> None:

	"""The reference chord is returned as the very same object."""

	chords = _extended(major, 4)
	revoiced = notemaker.voicings.revoice_chords(chords, min_interval=2)

	assert revoiced[0] is chords[0]
	assert len(revoiced) == len(chords)


def test_no_unisons (major: typing.List[int]) -> None:

	"""No two voices of a revoiced chord share a pitch."""

	for seed in range(25):
		for min_interval in (1, 2, 3):
			revoiced = notemaker.voicings.revoice_chords(_extended(major, seed), min_interval=min_interval)

			for chord in revoiced:
				pitches = chord.pitches()
				assert len(set(pitches)) == len(pitches)


def test_pitch_classes_are_kept (major: typing.List[int]) -> None:

	"""Revoicing only moves voices by whole octaves."""

	chords = _extended(major, 8)
	revoiced = notemaker.voicings.revoice_chords(chords, min_interval=2)

	for before, after in zip(chords, revoiced):
		assert collections.Counter(p % 12 for p in before.pitches()) == collections.Counter(p % 12 for p in after.pitches())
		assert [note.role for note in before.notes] == [note.role for note in after.notes]


def test_pedal_stays_near_previous_pedal (major: typing.List[int]) -> None:

	"""A pedal voice never jumps more than a tritone from its previous pitch."""

	for seed in range(10):
		revoiced = notemaker.voicings.revoice_chords(_extended(major, seed), pedal_role=notemaker.notes.Role.FIFTH)

		for previous, current in zip(revoiced, revoiced[1:]):
			before = previous.find(notemaker.notes.Role.FIFTH)
			after = current.find(notemaker.notes.Role.FIFTH)

			assert before is not None and after is not None
			assert abs(after.pitch - before.pitch) <= 6


def test_empty_progression () -> None:

	assert notemaker.voicings.revoice_chords([]) == []
