import random
import typing

import pytest

import notemaker.chord_graphs.diatonic_flow
import notemaker.errors
import notemaker.notes
import notemaker.progression
import notemaker.scales


def test_first_chord_is_tonic_triad (major: typing.List[int]) -> None:

	"""C major always opens on C-E-G at middle C."""

	progression = notemaker.progression.generate_chord_progression(0, major, length=4, rng=random.Random(11))
	first = progression[0]

	assert len(progression) == 4
	assert first.degree == 0
	assert first.pitches() == [60, 64, 67]
	assert [note.role for note in first.notes] == [notemaker.notes.Role.ROOT, notemaker.notes.Role.THIRD, notemaker.notes.Role.FIFTH]


def test_triads_are_stacked_from_the_scale (major: typing.List[int]) -> None:

	"""Every chord takes scale indices d, d + 2 and d + 4."""

	profile = notemaker.scales.to_semitone_profile(major)
	scale_notes = notemaker.progression.chord_scale_notes(60, profile)

	for seed in range(10):
		progression = notemaker.progression.generate_chord_progression(0, major, length=6, rng=random.Random(seed))

		for chord in progression:
			d = chord.degree
			assert chord.pitches() == [scale_notes[d], scale_notes[d + 2], scale_notes[d + 4]]


def test_chord_placement (major: typing.List[int]) -> None:

	"""One whole-note chord per bar, at the configured velocity, on the role channels."""

	config = notemaker.progression.ProgressionConfig(velocity=90)
	progression = notemaker.progression.generate_chord_progression(0, major, length=3, rng=random.Random(2), config=config)

	for bar, chord in enumerate(progression):
		for note in chord.notes:
			assert note.position == bar * 16
			assert note.length == 4.0
			assert note.velocity == 90
			assert note.channel == notemaker.notes.ROLE_CHANNELS[note.role]


def test_key_transposes (major: typing.List[int]) -> None:

	"""A D major progression opens on D-F#-A."""

	progression = notemaker.progression.generate_chord_progression(2, major, length=2, rng=random.Random(5))

	assert progression[0].pitches() == [62, 66, 69]


def test_degree_walk_follows_graph_edges () -> None:

	"""Consecutive degrees are always connected in the transition table."""

	table = notemaker.chord_graphs.diatonic_flow.DIATONIC_FLOW

	for seed in range(20):
		degrees = notemaker.progression.generate_degree_sequence(8, random.Random(seed))

		assert degrees[0] == 0

		for source, target in zip(degrees, degrees[1:]):
			assert target in [t for t, _ in table[source]]


def test_same_seed_same_progression (major: typing.List[int]) -> None:

	a = notemaker.progression.generate_chord_progression(0, major, length=8, rng=random.Random(9))
	b = notemaker.progression.generate_chord_progression(0, major, length=8, rng=random.Random(9))

	assert a == b


def test_invalid_length_raises (major: typing.List[int]) -> None:

	with pytest.raises(notemaker.errors.InvalidParameterError):
		notemaker.progression.generate_chord_progression(0, major, length=0, rng=random.Random(1))


def test_short_scales_wrap_degrees () -> None:

	"""Pentatonic and whole-tone progressions build a triad for every degree."""

	for name in ("Major Pentatonic", "Whole Tone", "Blues"):
		steps = notemaker.scales.get_intervals(name)
		profile = notemaker.scales.to_semitone_profile(steps)
		scale_notes = notemaker.progression.chord_scale_notes(60, profile)

		for degree in range(7):
			chord = notemaker.progression.build_chord(degree, 0, scale_notes, len(profile))
			root, third, fifth = chord.pitches()

			assert root < third < fifth


def test_extensions (major: typing.List[int]) -> None:

	"""Seventh sits a fifth above the third, tenth 14 above the root, bass two octaves down."""

	progression = notemaker.progression.generate_chord_progression(0, major, length=4, rng=random.Random(3))

	extended = notemaker.progression.add_bass(notemaker.progression.add_tenth(notemaker.progression.add_seventh(progression)))

	for chord in extended:
		root = chord.find(notemaker.notes.Role.ROOT)
		third = chord.find(notemaker.notes.Role.THIRD)
		seventh = chord.find(notemaker.notes.Role.SEVENTH)
		tenth = chord.find(notemaker.notes.Role.TENTH)
		bass = chord.find(notemaker.notes.Role.BASS)

		assert root is not None and third is not None
		assert seventh is not None and seventh.pitch == third.pitch + 7 and seventh.channel == 6
		assert tenth is not None and tenth.pitch == root.pitch + 14 and tenth.channel == 9
		assert bass is not None and bass.pitch == root.pitch - 24 and bass.channel == 15

	# The input progression is untouched.
	assert all(len(chord.notes) == 3 for chord in progression)


def test_extension_skips_chords_without_anchor () -> None:

	"""A chord missing the anchor role passes through unchanged."""

	fifth_only = notemaker.notes.Chord(degree=0, notes=(
		notemaker.notes.Note(pitch=67, position=0, length=4, velocity=64, role=notemaker.notes.Role.FIFTH),
	))

	assert notemaker.progression.add_seventh([fifth_only]) == [fifth_only]
	assert notemaker.progression.add_bass([fifth_only]) == [fifth_only]


def test_render_adds_bass_after_revoicing (major: typing.List[int]) -> None:

	"""The bass follows the revoiced root, two octaves below it."""

	progression = notemaker.progression.generate_chord_progression(0, major, length=8, rng=random.Random(21))
	options = notemaker.progression.RenderOptions(add_seventh=True, revoice=True, min_interval=2, add_bass=True)

	rendered = notemaker.progression.render_progression(progression, options)

	assert len(rendered) == 8

	for chord in rendered:
		root = chord.find(notemaker.notes.Role.ROOT)
		bass = chord.find(notemaker.notes.Role.BASS)

		assert root is not None and bass is not None
		assert bass.pitch == root.pitch - 24
		assert len(chord.notes) == 5


def test_render_without_options_is_identity (major: typing.List[int]) -> None:

	progression = notemaker.progression.generate_chord_progression(0, major, length=4, rng=random.Random(1))

	assert notemaker.progression.render_progression(progression) == progression
