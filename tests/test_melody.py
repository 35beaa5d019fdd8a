import random

import pytest

import notemaker.errors
import notemaker.melody
import notemaker.scales


C_MAJOR_PCS = {0, 2, 4, 5, 7, 9, 11}


def test_all_rests_still_fill_the_bars () -> None:

	"""With rests certain, no notes are written but every step is consumed."""

	config = notemaker.melody.MelodyConfig(bars=2, rest_probability=100, length_variation=60)
	generator = notemaker.melody.MelodyGenerator(config, random.Random(1))

	assert generator.generate() == []
	assert generator.position == 32


def test_melody_ends_on_last_step () -> None:

	"""Long notes near the end are shortened so nothing spills past the bars."""

	for seed in range(20):
		config = notemaker.melody.MelodyConfig(bars=2, length_variation=100, repetition_chance=20, motif_chance=20)
		generator = notemaker.melody.MelodyGenerator(config, random.Random(seed))
		notes = generator.generate()

		assert generator.position == 32

		for note in notes:
			assert 0 <= note.position < 32
			assert note.position + note.length * 4 <= 32


def test_notes_stay_in_key () -> None:

	"""New, repeated and developed notes all belong to the scale."""

	for seed in range(20):
		config = notemaker.melody.MelodyConfig(bars=4, allow_repeat_notes=True, repetition_chance=30, motif_chance=30, length_variation=40)
		notes = notemaker.melody.generate_melody(config, random.Random(seed))

		assert notes
		assert all(note.pitch % 12 in C_MAJOR_PCS for note in notes)


def test_register_follows_octave_start () -> None:

	"""New notes start at ``(octave_start + 1) * 12`` above the key and span the octave range."""

	config = notemaker.melody.MelodyConfig(root=2, octave_start=4, octave_range=2, bars=4, allow_repeat_notes=True)
	notes = notemaker.melody.generate_melody(config, random.Random(3))

	assert config.base_note == 62
	assert all(62 <= note.pitch < 62 + 24 for note in notes)


def test_sixteenths_only_without_length_variation () -> None:

	config = notemaker.melody.MelodyConfig(bars=1, length_variation=0, rest_probability=0)
	notes = notemaker.melody.generate_melody(config, random.Random(5))

	assert len(notes) == 16
	assert all(note.length == 0.25 for note in notes)
	assert [note.position for note in notes] == list(range(16))


def test_no_recent_repeats () -> None:

	"""Without repeats allowed, a new note never matches any of the four before it."""

	for seed in range(10):
		config = notemaker.melody.MelodyConfig(bars=4)
		notes = notemaker.melody.generate_melody(config, random.Random(seed))
		pitches = [note.pitch for note in notes]

		for i, pitch in enumerate(pitches):
			assert pitch not in pitches[max(0, i - 4):i]


def test_randomness_zero_uses_fixed_expression () -> None:

	notes = notemaker.melody.generate_melody(notemaker.melody.MelodyConfig(bars=1, randomness=0), random.Random(2))

	assert all(note.velocity == 80 for note in notes)
	assert all(note.timbre == 0.0 and note.pressure == 0.0 for note in notes)


def test_randomness_full_uses_random_velocity () -> None:

	notes = notemaker.melody.generate_melody(notemaker.melody.MelodyConfig(bars=4, randomness=100), random.Random(2))

	assert all(25 <= note.velocity <= 94 for note in notes)
	assert len({note.velocity for note in notes}) > 1


def test_emphasis_boosts_stable_degrees_on_strong_beats () -> None:

	config = notemaker.melody.MelodyConfig(emphasis=100)
	generator = notemaker.melody.MelodyGenerator(config, random.Random(1))

	assert generator._degree_weights(strong=True) == [60, 10, 10, 40, 40, 5, 5]
	assert generator._degree_weights(strong=False) == [30, 10, 10, 20, 20, 5, 5]


def test_single_degree_weight () -> None:

	"""Only the supertonic can be chosen when it holds all the weight."""

	config = notemaker.melody.MelodyConfig(bars=1, degree_weights=[0, 1, 0, 0, 0, 0, 0], allow_repeat_notes=True, emphasis=100)
	notes = notemaker.melody.generate_melody(config, random.Random(4))

	assert {note.pitch for note in notes} == {50}


def test_same_seed_same_melody () -> None:

	config = notemaker.melody.MelodyConfig(bars=4, repetition_chance=20, motif_chance=20, length_variation=50)

	a = notemaker.melody.generate_melody(config, random.Random(8))
	b = notemaker.melody.generate_melody(config, random.Random(8))

	assert a == b


def test_invalid_config_raises () -> None:

	with pytest.raises(notemaker.errors.InvalidParameterError):
		notemaker.melody.MelodyGenerator(notemaker.melody.MelodyConfig(bars=0))

	with pytest.raises(notemaker.errors.InvalidParameterError):
		notemaker.melody.MelodyGenerator(notemaker.melody.MelodyConfig(degree_weights=[0, 0, 0]))

	with pytest.raises(notemaker.errors.InvalidScaleError):
		notemaker.melody.MelodyGenerator(notemaker.melody.MelodyConfig(steps=[]))


def test_length_options () -> None:

	assert notemaker.melody.length_options(0) == [(0.25, 100), (0.5, 0), (1.0, 0), (2.0, 0)]
	full = notemaker.melody.length_options(100)

	assert [length for length, _ in full] == [0.25, 0.5, 1.0, 2.0]
	assert [weight for _, weight in full] == pytest.approx([0, 60, 30, 10])


def test_alternative_melody () -> None:

	"""Variations keep timing, move notes by one scale tone and stay in key."""

	scale_notes = notemaker.scales.expand_scale(0, [2, 2, 1, 2, 2, 2, 1], 36, 96)
	melody = notemaker.melody.generate_melody(notemaker.melody.MelodyConfig(bars=2, allow_repeat_notes=True), random.Random(6))

	unchanged = notemaker.melody.alternative_melody(melody, scale_notes, 0, random.Random(1))
	varied = notemaker.melody.alternative_melody(melody, scale_notes, 100, random.Random(1))

	assert unchanged == melody
	assert len(varied) == len(melody)

	for before, after in zip(melody, varied):
		assert after.position == before.position
		assert after.length == before.length
		assert after.pitch != before.pitch
		assert abs(scale_notes.index(after.pitch) - scale_notes.index(before.pitch)) == 1
