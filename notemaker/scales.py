"""Scale definitions and pitch-set utilities.

A scale is defined by its **steps**: the semitone distance between
consecutive degrees (``[2, 2, 1, 2, 2, 2, 1]`` for major). Scales whose steps
sum to 12 repeat every octave; any other sum produces a non-repeating scale
that keeps climbing (or falling) by its own period.

Module-level constants:
- ``SCALE_INTERVALS``: Built-in scale table, name -> steps
- ``NOTE_NAME_TO_PC``: Maps note names (``"C"``, ``"F#"``, ``"Bb"``) to pitch classes

Module-level helpers:
- ``to_semitone_profile(steps)``: Cumulative offsets of each degree from the root
- ``expand_scale(root, steps)``: Every scale pitch in the MIDI range, sorted
- ``register_scale(name, steps)``: Add a scale to the table
"""

import bisect
import logging
import typing

import notemaker.constants
import notemaker.constants.durations
import notemaker.constants.velocity
import notemaker.errors
import notemaker.notes


logger = logging.getLogger(__name__)


SCALE_INTERVALS: typing.Dict[str, typing.List[int]] = {
	"Lydian": [2, 2, 2, 1, 2, 2, 1],
	"Major": [2, 2, 1, 2, 2, 2, 1],
	"Mixolydian": [2, 2, 1, 2, 2, 1, 2],
	"Dorian": [2, 1, 2, 2, 2, 1, 2],
	"Natural Minor": [2, 1, 2, 2, 1, 2, 2],
	"Phrygian": [1, 2, 2, 2, 1, 2, 2],
	"Locrian": [1, 2, 2, 1, 2, 2, 2],
	"Harmonic Minor": [2, 1, 2, 2, 1, 3, 1],
	"Melodic Minor": [2, 1, 2, 2, 2, 2, 1],
	"Double Harmonic Minor": [1, 3, 1, 2, 1, 3, 1],
	"Double Harmonic Major": [1, 3, 1, 2, 1, 3, 1],
	"Phrygian Dominant": [1, 3, 1, 2, 1, 2, 2],
	"Mixolydian Flat 6": [2, 2, 1, 2, 1, 2, 2],
	"Lydian Dominant": [2, 2, 2, 1, 2, 1, 2],
	"Lydian Diminished": [2, 1, 3, 1, 1, 2, 1],
	"Lydian Augmented": [2, 2, 2, 2, 1, 2, 1],
	"Whole Tone": [2, 2, 2, 2, 2, 2],
	"Major Whole Tone": [2, 2, 1, 2, 1, 2, 1],
	"Minor Whole Tone": [2, 1, 2, 1, 2, 2, 2],
	"Hirajoshi": [4, 2, 3, 4, 3],
	"Iwato": [1, 4, 1, 4, 2],
	"Istrian": [1, 2, 1, 2, 1, 5],
	"Major Pentatonic": [2, 2, 3, 2, 3],
	"Minor Pentatonic": [3, 2, 2, 3, 2],
	"Blues": [3, 2, 1, 1, 3, 2],
	"Arabic": [2, 1, 3, 1, 2, 2, 1],
	"Persian": [1, 3, 1, 1, 2, 3, 1],
	"Prometheus": [2, 2, 2, 3, 1, 2],
	"Pelog": [1, 2, 4, 1, 4],
	"Chromatic": [1],
	"Ionian": [2, 2, 1, 2, 2, 2, 1],
	"Aeolian": [2, 1, 2, 2, 1, 2, 2],
}


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

OCTAVE = 12


def key_name_to_pc (key_name: str) -> int:

	"""Validate a key name and return its pitch class (0-11).

	Raises:
		InvalidParameterError: If the key name is not recognised.

	Example:
		```python
		key_name_to_pc("C")   # → 0
		key_name_to_pc("Bb")  # → 10
		```
	"""

	if key_name not in NOTE_NAME_TO_PC:
		raise notemaker.errors.InvalidParameterError(
			f"Unknown key name: {key_name!r}. Expected e.g. 'C', 'F#', 'Bb'."
		)

	return NOTE_NAME_TO_PC[key_name]


def validate_steps (steps: typing.Sequence[int]) -> None:

	"""Raise ``InvalidScaleError`` unless ``steps`` is a non-empty list of positive integers."""

	if not steps:
		raise notemaker.errors.InvalidScaleError("Scale steps cannot be empty")

	for step in steps:
		if not isinstance(step, int) or isinstance(step, bool) or step <= 0:
			raise notemaker.errors.InvalidScaleError(f"Scale steps must be positive integers, got {list(steps)}")


def register_scale (name: str, steps: typing.Sequence[int]) -> None:

	"""Add a scale to ``SCALE_INTERVALS``.

	Parameters:
		name: Name used with :func:`get_intervals`. An existing entry is replaced.
		steps: Semitone steps between consecutive degrees.

	Example:
		```python
		register_scale("Kumoi", [2, 1, 4, 2, 3])
		```
	"""

	validate_steps(steps)

	if name in SCALE_INTERVALS:
		logger.info(f"Replacing scale definition: {name}")

	SCALE_INTERVALS[name] = list(steps)


def get_intervals (name: str) -> typing.List[int]:

	"""
	Return a named scale's steps from the table.
	"""

	if name not in SCALE_INTERVALS:
		raise notemaker.errors.InvalidScaleError(f"Unknown scale: {name}")

	return list(SCALE_INTERVALS[name])


def is_octave_repeating (steps: typing.Sequence[int]) -> bool:

	"""Return True when the steps close exactly on the octave."""

	return sum(steps) == OCTAVE


def to_semitone_profile (steps: typing.Sequence[int]) -> typing.List[int]:

	"""Convert scale steps into each degree's offset from the root.

	The running sum starts at 0; the final cumulative value (the step that
	closes the octave) is dropped, so the profile has one entry per degree.

	Example:
		```python
		to_semitone_profile([2, 2, 1, 2, 2, 2, 1])  # [0, 2, 4, 5, 7, 9, 11]
		to_semitone_profile([1])                    # [0]
		```
	"""

	validate_steps(steps)

	profile: typing.List[int] = []
	current = 0

	for step in steps:
		profile.append(current)
		current += step

	return profile


def expand_scale (
	root: int,
	steps: typing.Sequence[int],
	midi_floor: int = notemaker.constants.MIDI_NOTE_MIN,
	midi_ceil: int = notemaker.constants.MIDI_NOTE_MAX
) -> typing.List[int]:

	"""Return every pitch of a scale between two bounds, sorted and unique.

	Octave-repeating scales build one octave of pitch classes and replicate it
	across every octave inside ``[midi_floor, midi_ceil]``. Other scales walk
	outward from ``root`` - upward with the steps in order, downward with the
	steps reversed - until the next step would leave the range.

	Parameters:
		root: MIDI note the scale is anchored on
		steps: Semitone steps between consecutive degrees
		midi_floor: Lowest pitch to include
		midi_ceil: Highest pitch to include

	Example:
		```python
		major = expand_scale(60, [2, 2, 1, 2, 2, 2, 1])
		major[:8]   # [0, 2, 4, 5, 7, 9, 11, 12]
		```
	"""

	validate_steps(steps)

	if midi_floor > midi_ceil:
		raise notemaker.errors.InvalidParameterError(f"Pitch range is inverted: {midi_floor} > {midi_ceil}")

	if is_octave_repeating(steps):

		pitch_classes = {(root + offset) % OCTAVE for offset in to_semitone_profile(steps)}

		return [p for p in range(midi_floor, midi_ceil + 1) if p % OCTAVE in pitch_classes]

	notes: typing.Set[int] = set()

	if midi_floor <= root <= midi_ceil:
		notes.add(root)

	for direction, ordered in ((1, list(steps)), (-1, list(reversed(steps)))):

		current = root
		index = 0

		while True:
			current += direction * ordered[index % len(ordered)]

			if current < midi_floor or current > midi_ceil:
				break

			notes.add(current)
			index += 1

	return sorted(notes)


def scale_tone (root: int, profile: typing.Sequence[int], index: int) -> int:

	"""Return the pitch of a scale index, wrapping into further octaves.

	Index ``len(profile)`` is the root an octave up, negative indices descend.

	Example:
		```python
		scale_tone(60, [0, 2, 4, 5, 7, 9, 11], 9)  # 64 (E above the next C)
		```
	"""

	if not profile:
		raise notemaker.errors.InvalidScaleError("Semitone profile cannot be empty")

	octave, degree = divmod(index, len(profile))

	return root + profile[degree] + OCTAVE * octave


def build_scale_notes (root: int, profile: typing.Sequence[int], octaves: int = 4) -> typing.List[int]:

	"""Return consecutive scale tones covering a number of octaves.

	The list holds ``octaves * len(profile) + 1`` notes, ending on the root of
	the top octave, so it can be indexed for third-stacked chords.
	"""

	if octaves <= 0:
		raise notemaker.errors.InvalidParameterError("Octaves must be positive")

	return [scale_tone(root, profile, i) for i in range(octaves * len(profile) + 1)]


def closest_lower_and_higher (pitch: int, scale_notes: typing.Sequence[int]) -> typing.Tuple[typing.Optional[int], typing.Optional[int]]:

	"""Return the nearest scale notes at or below and at or above a pitch.

	A pitch that is in the scale returns itself for both. Either side is
	``None`` when the pitch is beyond the end of the scale.
	"""

	index = bisect.bisect_left(scale_notes, pitch)

	if index < len(scale_notes) and scale_notes[index] == pitch:
		return pitch, pitch

	lower = scale_notes[index - 1] if index > 0 else None
	higher = scale_notes[index] if index < len(scale_notes) else None

	return lower, higher


def nearest_scale_note (pitch: int, scale_notes: typing.Sequence[int]) -> int:

	"""Snap a pitch to the nearest note of a sorted scale.

	Ties between the note below and the note above resolve downward.

	Example:
		```python
		nearest_scale_note(61, [60, 62, 64])  # 60
		```
	"""

	if not scale_notes:
		raise notemaker.errors.InvalidScaleError("Scale notes cannot be empty")

	lower, higher = closest_lower_and_higher(pitch, scale_notes)

	if lower is None:
		assert higher is not None
		return higher

	if higher is None:
		return lower

	return lower if (pitch - lower) <= (higher - pitch) else higher


def scale_note_stack (root: int, steps: typing.Sequence[int]) -> typing.List[notemaker.notes.Note]:

	"""Return every pitch of a scale stacked on the first step.

	The notes are muted, so the stack shows which piano-roll rows belong to the
	scale without making a sound.
	"""

	return [
		notemaker.notes.Note(
			pitch = pitch,
			position = 0,
			length = notemaker.constants.durations.SIXTEENTH,
			velocity = notemaker.constants.velocity.STACK_VELOCITY,
			muted = True
		)
		for pitch in expand_scale(root, steps)
	]
