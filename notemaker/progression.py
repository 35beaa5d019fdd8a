"""Diatonic chord progressions driven by a Markov chain over scale degrees.

A progression is a list of :class:`~notemaker.notes.Chord`, one per bar. The
degree sequence starts on I and each following degree is drawn from the
current degree's outgoing edges, with degrees already used damped so the
progression keeps moving. Triads are stacked in thirds from the scale itself
(tones ``d``, ``d + 2``, ``d + 4``), so the chord qualities follow the mode.

Extensions are separate pure passes - :func:`add_seventh`, :func:`add_tenth`,
:func:`add_bass` - and :func:`render_progression` applies them together with
the revoicer in a fixed order.

Example:
	```python
	import random
	import notemaker.notes
	import notemaker.progression
	import notemaker.scales

	rng = random.Random(7)
	major = notemaker.scales.get_intervals("Major")
	progression = notemaker.progression.generate_chord_progression(0, major, length=4, rng=rng)

	options = notemaker.progression.RenderOptions(add_seventh=True, revoice=True)
	notes = notemaker.notes.flatten(notemaker.progression.render_progression(progression, options))
	```
"""

import dataclasses
import logging
import random
import typing

import notemaker.chord_graphs
import notemaker.chord_graphs.diatonic_flow
import notemaker.constants.durations
import notemaker.constants.velocity
import notemaker.errors
import notemaker.notes
import notemaker.scales
import notemaker.voicings


logger = logging.getLogger(__name__)


DEFAULT_BASE_NOTE = 60
DEFAULT_REPEAT_PENALTY = 0.3

SEVENTH_FROM_THIRD = 7
TENTH_FROM_ROOT = 14
BASS_FROM_ROOT = -24

# Scale-index offsets of the triad tones above the chord root.
TRIAD_OFFSETS: typing.List[typing.Tuple[notemaker.notes.Role, int]] = [
	(notemaker.notes.Role.ROOT, 0),
	(notemaker.notes.Role.THIRD, 2),
	(notemaker.notes.Role.FIFTH, 4),
]


@dataclasses.dataclass
class ProgressionConfig:

	"""
	Parameters for :func:`generate_chord_progression`.

	Attributes:
		base_note: MIDI note of C in the chord register (60 = middle C).
		velocity: Velocity of every chord tone (1-127).
		repeat_penalty: Multiplier applied to transitions towards degrees
			already in the progression (0.0-1.0; 1.0 disables it).
		graph: Degree transition graph.
	"""

	base_note: int = DEFAULT_BASE_NOTE
	velocity: int = notemaker.constants.velocity.DEFAULT_CHORD_VELOCITY
	repeat_penalty: float = DEFAULT_REPEAT_PENALTY
	graph: notemaker.chord_graphs.ChordGraph = dataclasses.field(default_factory=notemaker.chord_graphs.diatonic_flow.DiatonicFlow)


@dataclasses.dataclass
class RenderOptions:

	"""
	Extension and revoicing switches applied by :func:`render_progression`.

	Attributes:
		add_seventh: Add a seventh above the third.
		add_tenth: Add a tenth above the root.
		revoice: Run the voice-leading optimizer.
		min_interval: Smallest allowed distance between voices when revoicing (semitones).
		pedal_role: Role held as a pedal tone when revoicing, or None.
		add_bass: Add the root two octaves down (after revoicing).
	"""

	add_seventh: bool = False
	add_tenth: bool = False
	revoice: bool = False
	min_interval: int = notemaker.voicings.DEFAULT_MIN_INTERVAL
	pedal_role: typing.Optional[notemaker.notes.Role] = None
	add_bass: bool = False


def generate_degree_sequence (
	length: int,
	rng: random.Random,
	graph: typing.Optional[notemaker.chord_graphs.ChordGraph] = None,
	repeat_penalty: float = DEFAULT_REPEAT_PENALTY
) -> typing.List[int]:

	"""Walk the degree graph for ``length`` chords.

	Parameters:
		length: Number of degrees to produce (one per bar)
		rng: Random number generator instance
		graph: Transition graph (default: :class:`DiatonicFlow`)
		repeat_penalty: Weight multiplier for degrees already chosen

	Returns:
		List of degrees, always starting on the graph's start degree
	"""

	if length <= 0:
		raise notemaker.errors.InvalidParameterError(f"Progression length must be positive, got {length}")

	if repeat_penalty < 0 or repeat_penalty > 1:
		raise notemaker.errors.InvalidParameterError("Repeat penalty must be between 0 and 1")

	if graph is None:
		graph = notemaker.chord_graphs.diatonic_flow.DiatonicFlow()

	weighted, current = graph.build()
	degrees = [current]

	def weight_modifier (source: int, target: int, weight: float) -> float:

		"""Damp transitions towards degrees the progression already holds."""

		return repeat_penalty if target in degrees else 1.0

	for _ in range(1, length):
		current = weighted.choose_next(current, rng, weight_modifier=weight_modifier)
		degrees.append(current)

	return degrees


def chord_scale_notes (root: int, profile: typing.Sequence[int]) -> typing.List[int]:

	"""Return enough consecutive scale tones to stack a triad on every degree.

	The highest degree (vii, index 6) needs index ``6 + 4``; for scales with fewer
	than seven degrees the array wraps into further octaves.
	"""

	needed = notemaker.chord_graphs.DEGREE_COUNT - 1 + TRIAD_OFFSETS[-1][1] + 1
	octaves = max(1, -(-needed // len(profile)))

	return notemaker.scales.build_scale_notes(root, profile, octaves)


def build_chord (
	degree: int,
	bar: int,
	scale_notes: typing.Sequence[int],
	scale_size: int,
	velocity: int = notemaker.constants.velocity.DEFAULT_CHORD_VELOCITY
) -> notemaker.notes.Chord:

	"""Stack a triad on a degree and place it on a bar.

	Degrees wrap modulo the scale size, so scales with fewer than seven notes
	reuse their lower degrees rather than indexing past the scale.
	"""

	root_index = degree % scale_size
	position = bar * notemaker.constants.durations.STEPS_PER_BAR

	notes = [
		notemaker.notes.Note(
			pitch = scale_notes[root_index + offset],
			position = position,
			length = notemaker.constants.durations.WHOLE,
			velocity = velocity,
			channel = notemaker.notes.ROLE_CHANNELS[role],
			role = role
		)
		for role, offset in TRIAD_OFFSETS
	]

	return notemaker.notes.Chord(degree=degree, notes=tuple(notes))


def generate_chord_progression (
	root: int,
	steps: typing.Sequence[int],
	length: int = 4,
	rng: typing.Optional[random.Random] = None,
	config: typing.Optional[ProgressionConfig] = None
) -> notemaker.notes.Progression:

	"""Generate a diatonic triad progression, one chord per bar.

	Parameters:
		root: Key pitch class (0 = C, 1 = C#, ...)
		steps: Scale steps of the mode (e.g. ``[2, 2, 1, 2, 2, 2, 1]``)
		length: Number of chords
		rng: Random number generator instance
		config: Register, velocity and graph settings

	Returns:
		List of chords with ROOT, THIRD and FIFTH notes

	Example:
		```python
		progression = generate_chord_progression(0, [2, 2, 1, 2, 2, 2, 1], 4, random.Random(1))
		progression[0].pitches()  # [60, 64, 67]
		```
	"""

	if config is None:
		config = ProgressionConfig()

	rng = rng or random.Random()
	profile = notemaker.scales.to_semitone_profile(steps)
	scale_notes = chord_scale_notes(config.base_note + root, profile)

	degrees = generate_degree_sequence(length, rng, config.graph, config.repeat_penalty)

	logger.info("Progression: " + " - ".join(notemaker.chord_graphs.degree_name(d) for d in degrees))

	return [
		build_chord(degree, bar, scale_notes, len(profile), config.velocity)
		for bar, degree in enumerate(degrees)
	]


def _extend (
	progression: typing.Iterable[notemaker.notes.Chord],
	anchor: notemaker.notes.Role,
	role: notemaker.notes.Role,
	interval: int
) -> notemaker.notes.Progression:

	"""Add a note ``interval`` semitones from each chord's ``anchor`` note."""

	result: notemaker.notes.Progression = []

	for chord in progression:

		anchor_note = chord.find(anchor)

		if anchor_note is None:
			# Decision path: nothing to extend from, keep the chord as it is.
			result.append(chord)
			continue

		extension = dataclasses.replace(
			anchor_note,
			pitch = anchor_note.pitch + interval,
			channel = notemaker.notes.ROLE_CHANNELS[role],
			role = role
		)

		result.append(chord.with_notes(chord.notes + (extension,)))

	return result


def add_seventh (progression: typing.Iterable[notemaker.notes.Chord]) -> notemaker.notes.Progression:

	"""Add a seventh, a fifth above each chord's third.

	Assumes third-stacked chords; on a suspended chord the result is not a
	true seventh.
	"""

	return _extend(progression, notemaker.notes.Role.THIRD, notemaker.notes.Role.SEVENTH, SEVENTH_FROM_THIRD)


def add_tenth (progression: typing.Iterable[notemaker.notes.Chord]) -> notemaker.notes.Progression:

	"""Add a note 14 semitones above each chord's root."""

	return _extend(progression, notemaker.notes.Role.ROOT, notemaker.notes.Role.TENTH, TENTH_FROM_ROOT)


def add_bass (progression: typing.Iterable[notemaker.notes.Chord]) -> notemaker.notes.Progression:

	"""Add each chord's root two octaves down."""

	return _extend(progression, notemaker.notes.Role.ROOT, notemaker.notes.Role.BASS, BASS_FROM_ROOT)


def render_progression (progression: notemaker.notes.Progression, options: typing.Optional[RenderOptions] = None) -> notemaker.notes.Progression:

	"""Apply extensions and voice leading without touching the input.

	Order: seventh, tenth, revoice, bass. The bass is added last so it stays
	two octaves under the revoiced root instead of being pulled into the chord.
	"""

	if options is None:
		options = RenderOptions()

	current = list(progression)

	if options.add_seventh:
		current = add_seventh(current)

	if options.add_tenth:
		current = add_tenth(current)

	if options.revoice:
		current = notemaker.voicings.revoice_chords(current, min_interval=options.min_interval, pedal_role=options.pedal_role)

	if options.add_bass:
		current = add_bass(current)

	return current
