import random
import typing

import pytest

import notemaker.errors
import notemaker.motif
import notemaker.scales


@pytest.fixture
def legal () -> typing.List[int]:

	"""C major from C3 to C5."""

	return notemaker.scales.expand_scale(48, [2, 2, 1, 2, 2, 2, 1], 48, 72)


def _motif (*pitches: int) -> typing.List[notemaker.motif.MotifNote]:

	return [notemaker.motif.MotifNote(pitch=p, velocity=80, length=0.25) for p in pitches]


def test_extract_needs_three_notes () -> None:

	assert notemaker.motif.extract_motif(_motif(60, 62), random.Random(1)) == []


def test_extract_takes_recent_tail () -> None:

	"""A motif is the last three to five notes of the history."""

	history = _motif(48, 50, 52, 53, 55, 57, 59, 60)

	for seed in range(20):
		motif = notemaker.motif.extract_motif(history, random.Random(seed))

		assert 3 <= len(motif) <= 5
		assert motif == history[-len(motif):]


def test_transpose_by_scale_steps (legal: typing.List[int]) -> None:

	"""C-E-G up one scale step is D-F-A."""

	result = notemaker.motif.transpose(_motif(60, 64, 67), 1, legal)

	assert [n.pitch for n in result] == [62, 65, 69]


def test_transpose_clamps_at_range_top (legal: typing.List[int]) -> None:

	result = notemaker.motif.transpose(_motif(71, 72), 2, legal)

	assert [n.pitch for n in result] == [72, 72]


def test_invert_mirrors_around_first_note (legal: typing.List[int]) -> None:

	"""Intervals are mirrored, then snapped back into the scale (ties downward)."""

	result = notemaker.motif.invert(_motif(60, 64, 67), legal)

	assert [n.pitch for n in result] == [60, 55, 53]


def test_retrograde () -> None:

	motif = _motif(60, 62, 64)

	assert notemaker.motif.retrograde(motif) == list(reversed(motif))


def test_octave_shift (legal: typing.List[int]) -> None:

	"""A motif moves an octave if it fits, otherwise raises."""

	assert [n.pitch for n in notemaker.motif.octave_shift(_motif(48, 52), legal, 1)] == [60, 64]

	with pytest.raises(notemaker.errors.RangeExhaustionError):
		notemaker.motif.octave_shift(_motif(48, 52), legal, -1)


def test_develop_stays_in_scale (legal: typing.List[int]) -> None:

	"""Every development keeps the motif's length, velocities and key."""

	motif = _motif(60, 64, 67, 65)
	rng = random.Random(7)

	for _ in range(100):
		result = notemaker.motif.develop(motif, legal, rng)

		assert len(result) == len(motif)
		assert all(n.pitch in legal for n in result)
		assert sorted(n.velocity for n in result) == [80, 80, 80, 80]


def test_develop_empty_motif (legal: typing.List[int]) -> None:

	assert notemaker.motif.develop([], legal, random.Random(1)) == []
