"""Generative single-line melodies.

:class:`MelodyGenerator` scans forward through ``bars * 16`` steps. At each
point it either develops a motif from what it has just played, repeats a
short run of recent notes, or writes a new note:

- **Motif development** (``motif_chance``) takes the last 3-5 notes and
  transposes, inverts, reverses or octave-shifts them, snapped back into the
  scale and register.
- **Repetition** (``repetition_chance``) replays the last 1-4 notes.
- **New note** picks a length (``length_variation``), a scale degree from
  seven ``degree_weights`` with the tonic, fourth and fifth boosted on strong
  beats (``emphasis``), avoids the last few pitches and blends a fixed
  velocity, timbre and pressure with random values (``randomness``).

Every note or rest advances the position by its length. The last note is
shortened so the melody ends exactly on the final step.

All chances and the variation parameters are percentages (0-100).

Example:
	```python
	import random
	import notemaker.melody

	config = notemaker.melody.MelodyConfig(bars=2, repetition_chance=20, motif_chance=15)
	notes = notemaker.melody.MelodyGenerator(config, random.Random(3)).generate()
	```
"""

import collections
import dataclasses
import logging
import random
import typing

import notemaker.constants
import notemaker.constants.durations
import notemaker.constants.velocity
import notemaker.errors
import notemaker.motif
import notemaker.notes
import notemaker.scales
import notemaker.sequence_utils


logger = logging.getLogger(__name__)


HISTORY_SIZE = 8
RECENT_PITCH_COUNT = 4
REPEAT_MAX_NOTES = 4
MAX_PITCH_ATTEMPTS = 8

# Degrees that strong beats lean towards: tonic, fourth and fifth.
EMPHASIS_DEGREES = (0, 3, 4)
STRONG_BEAT_STEPS = 4

# Perfect fifths, fourths and octaves used when a pitch keeps repeating.
SUBSTITUTE_INTERVALS = [7, -7, 5, -5, 12, -12]

VELOCITY_RANDOM_LOW = 25
VELOCITY_RANDOM_HIGH = 94
BASELINE_TIMBRE = 0.0
BASELINE_PRESSURE = 0.0


def _default_steps () -> typing.List[int]:

	return notemaker.scales.get_intervals("Major")


def _default_degree_weights () -> typing.List[float]:

	# Tonic, supertonic, mediant, subdominant, dominant, submediant, leading note.
	return [30, 10, 10, 20, 20, 5, 5]


@dataclasses.dataclass
class MelodyConfig:

	"""
	Parameters for :class:`MelodyGenerator`.

	Attributes:
		root: Key pitch class (0 = C).
		steps: Scale steps of the mode.
		octave_start: Octave of the lowest note; the register starts at
			``root + (octave_start + 1) * 12``.
		octave_range: Number of octaves new notes may use (at least 1).
		bars: Length of the melody in bars (16 steps each).
		degree_weights: Relative weight of each scale degree, tonic first.
		rest_probability: Chance (0-100) that a note becomes a rest.
		repetition_chance: Chance (0-100) of replaying recent notes.
		motif_chance: Chance (0-100) of developing a motif from recent notes.
		length_variation: 0 writes only sixteenths; higher values mix in
			eighths, quarters and halves.
		emphasis: Boost (0-100) for tonic, fourth and fifth on strong beats.
		randomness: Blend (0-100) between fixed and random velocity, timbre
			and pressure.
		allow_repeat_notes: Allow a pitch to repeat within the last four notes.
		channel: MIDI channel tag of the generated notes.
	"""

	root: int = 0
	steps: typing.List[int] = dataclasses.field(default_factory=_default_steps)
	octave_start: int = 3
	octave_range: int = 1
	bars: int = 1
	degree_weights: typing.List[float] = dataclasses.field(default_factory=_default_degree_weights)
	rest_probability: float = 0.0
	repetition_chance: float = 0.0
	motif_chance: float = 0.0
	length_variation: float = 0.0
	emphasis: float = 0.0
	randomness: float = 50.0
	allow_repeat_notes: bool = False
	channel: int = 0


	def validate (self) -> None:

		"""
		Raise for parameters no melody can be built from.
		"""

		notemaker.scales.validate_steps(self.steps)

		if self.bars <= 0:
			raise notemaker.errors.InvalidParameterError(f"Bars must be positive, got {self.bars}")

		if self.octave_range < 1:
			raise notemaker.errors.InvalidParameterError(f"Octave range must be at least 1, got {self.octave_range}")

		if not self.degree_weights or any(w < 0 for w in self.degree_weights) or sum(self.degree_weights) <= 0:
			raise notemaker.errors.InvalidParameterError(f"Degree weights need at least one positive value: {self.degree_weights}")


	@property
	def base_note (self) -> int:

		"""MIDI note of the root at the bottom of the register."""

		return self.root + (self.octave_start + 1) * 12


	@property
	def total_steps (self) -> int:

		"""Length of the melody in steps."""

		return self.bars * notemaker.constants.durations.STEPS_PER_BAR


def _percent (value: float) -> float:

	"""Clamp a percentage parameter into 0-100."""

	return notemaker.sequence_utils.clamp(value, 0.0, 100.0)


def length_options (length_variation: float) -> typing.List[typing.Tuple[float, float]]:

	"""Return (length, weight) pairs for a length variation of 0-100.

	Example:
		```python
		length_options(0)    # only sixteenths can be chosen
		length_options(100)  # eighths 60%, quarters 30%, halves 10%
		```
	"""

	variation = _percent(length_variation)

	return [
		(notemaker.constants.durations.SIXTEENTH, max(0.0, 100 - variation)),
		(notemaker.constants.durations.EIGHTH, variation * 0.6),
		(notemaker.constants.durations.QUARTER, variation * 0.3),
		(notemaker.constants.durations.HALF, variation * 0.1),
	]


class MelodyGenerator:

	"""Stateful melody scan over a fixed number of bars."""

	def __init__ (self, config: typing.Optional[MelodyConfig] = None, rng: typing.Optional[random.Random] = None) -> None:

		"""Validate the configuration and prepare the register.

		Parameters:
			config: Generation parameters (defaults to :class:`MelodyConfig`)
			rng: Random number generator instance
		"""

		self.config = config if config is not None else MelodyConfig()
		self.config.validate()

		self.rng = rng or random.Random()
		self.profile = notemaker.scales.to_semitone_profile(self.config.steps)

		low = notemaker.sequence_utils.clamp_pitch(self.config.base_note)
		top_offset = 12 * (self.config.octave_range - 1) + max(12, self.profile[-1])
		high = notemaker.sequence_utils.clamp_pitch(self.config.base_note + top_offset)

		# Every legal pitch of the register, used to keep motifs in key.
		self.scale_notes = notemaker.scales.expand_scale(self.config.base_note, self.config.steps, low, high)

		if not self.scale_notes:
			raise notemaker.errors.InvalidParameterError(f"No scale tones between {low} and {high}")

		self.reset()


	def reset (self) -> None:

		"""Forget all generated notes and start from step 0."""

		self.position: float = 0.0
		self.notes: typing.List[notemaker.notes.Note] = []
		self.history: typing.Deque[notemaker.motif.MotifNote] = collections.deque(maxlen=HISTORY_SIZE)
		self.recent_pitches: typing.Deque[int] = collections.deque(maxlen=RECENT_PITCH_COUNT)


	def generate (self) -> typing.List[notemaker.notes.Note]:

		"""Run a full scan and return the notes.

		The scan always ends with ``position == total_steps``.
		"""

		self.reset()
		total = self.config.total_steps

		while self.position < total:

			if len(self.history) >= notemaker.motif.MOTIF_MIN_NOTES and notemaker.sequence_utils.chance(_percent(self.config.motif_chance), self.rng):
				self._develop_motif()
				continue

			if len(self.history) > 1 and notemaker.sequence_utils.chance(_percent(self.config.repetition_chance), self.rng):
				self._repeat()
				continue

			self._new_note()

		logger.info(f"Melody: {len(self.notes)} notes over {self.config.bars} bar(s)")

		return list(self.notes)


	def _is_rest (self) -> bool:

		return notemaker.sequence_utils.chance(_percent(self.config.rest_probability), self.rng)


	def _place (self, pitch: int, velocity: int, length: float, rest: bool, **expression: typing.Optional[float]) -> typing.Optional[notemaker.notes.Note]:

		"""Write a note (or rest) at the current position and advance past it.

		Notes that would overflow the last step are shortened to fit.
		"""

		remaining = self.config.total_steps - self.position
		steps = length * notemaker.constants.durations.STEPS_PER_QUARTER

		if steps > remaining:
			steps = remaining
			length = remaining / notemaker.constants.durations.STEPS_PER_QUARTER

		note: typing.Optional[notemaker.notes.Note] = None

		if not rest:
			note = notemaker.notes.Note(
				pitch = pitch,
				position = self.position,
				length = length,
				velocity = velocity,
				channel = self.config.channel,
				**expression
			)
			self.notes.append(note)

		self.position += steps

		return note


	def _develop_motif (self) -> None:

		motif = notemaker.motif.extract_motif(list(self.history), self.rng)
		variation = notemaker.motif.develop(motif, self.scale_notes, self.rng)

		for item in variation:

			if self.position >= self.config.total_steps:
				break

			placed = self._place(item.pitch, item.velocity, item.length, self._is_rest())

			if placed is not None:
				self._remember(notemaker.motif.MotifNote(placed.pitch, placed.velocity, item.length))


	def _repeat (self) -> None:

		count = min(len(self.history), self.rng.randint(1, REPEAT_MAX_NOTES))

		for item in list(self.history)[-count:]:

			if self.position >= self.config.total_steps:
				break

			self._place(item.pitch, item.velocity, item.length, self._is_rest())


	def _new_note (self) -> None:

		length = notemaker.sequence_utils.weighted_choice(length_options(self.config.length_variation), self.rng)

		if self._is_rest():
			self._place(0, notemaker.constants.velocity.MIN_VELOCITY, length, rest=True)
			return

		strong = self.position % STRONG_BEAT_STEPS == 0
		pitch = self._choose_pitch(strong)
		amount = _percent(self.config.randomness) / 100

		velocity = notemaker.sequence_utils.blend(
			notemaker.constants.velocity.DEFAULT_MELODY_VELOCITY,
			self.rng.randint(VELOCITY_RANDOM_LOW, VELOCITY_RANDOM_HIGH),
			amount
		)

		placed = self._place(
			pitch,
			notemaker.sequence_utils.clamp_velocity(velocity),
			length,
			rest = False,
			timbre = notemaker.sequence_utils.blend(BASELINE_TIMBRE, self.rng.uniform(-1.0, 1.0), amount),
			pressure = notemaker.sequence_utils.blend(BASELINE_PRESSURE, self.rng.uniform(0.0, 1.0), amount)
		)

		assert placed is not None
		self._remember(notemaker.motif.MotifNote(placed.pitch, placed.velocity, length))


	def _remember (self, item: notemaker.motif.MotifNote) -> None:

		self.history.append(item)
		self.recent_pitches.append(item.pitch)


	def _degree_weights (self, strong: bool) -> typing.List[float]:

		"""Return the degree weights, boosted towards stable degrees on strong beats."""

		weights = list(self.config.degree_weights)

		if strong and self.config.emphasis > 0:
			boost = 1.0 + _percent(self.config.emphasis) / 100

			for degree in EMPHASIS_DEGREES:
				if degree < len(weights):
					weights[degree] *= boost

		return weights


	def _sample_pitch (self, strong: bool) -> int:

		index = notemaker.sequence_utils.weighted_index(self._degree_weights(strong), self.rng)
		interval = self.profile[index % len(self.profile)]
		octave = self.rng.randrange(self.config.octave_range)

		return notemaker.sequence_utils.clamp_pitch(self.config.base_note + interval + 12 * octave)


	def _fresh_pitch (self, strong: bool) -> int:

		"""Sample until a pitch outside the recent pitches turns up.

		Raises:
			RangeExhaustionError: After ``MAX_PITCH_ATTEMPTS`` repeats.
		"""

		for _ in range(MAX_PITCH_ATTEMPTS):
			candidate = self._sample_pitch(strong)
			if candidate not in self.recent_pitches:
				return candidate

		raise notemaker.errors.RangeExhaustionError(f"No fresh pitch after {MAX_PITCH_ATTEMPTS} attempts")


	def _choose_pitch (self, strong: bool) -> int:

		if self.config.allow_repeat_notes:
			return self._sample_pitch(strong)

		try:
			return self._fresh_pitch(strong)

		except notemaker.errors.RangeExhaustionError as exc:
			logger.debug(f"{exc}, substituting a fourth, fifth or octave")
			return self._substitute(self._sample_pitch(strong))


	def _substitute (self, pitch: int) -> int:

		"""Replace a repeated pitch with a perfect fourth, fifth or octave away."""

		options = [
			pitch + interval for interval in SUBSTITUTE_INTERVALS
			if notemaker.constants.MIDI_NOTE_MIN <= pitch + interval <= notemaker.constants.MIDI_NOTE_MAX
		]

		fresh = [p for p in options if p not in self.recent_pitches]

		if fresh:
			return self.rng.choice(fresh)

		if options:
			return self.rng.choice(options)

		return pitch


def generate_melody (config: typing.Optional[MelodyConfig] = None, rng: typing.Optional[random.Random] = None) -> typing.List[notemaker.notes.Note]:

	"""Generate a melody in one call."""

	return MelodyGenerator(config, rng).generate()


def alternative_melody (
	notes: typing.Iterable[notemaker.notes.Note],
	scale_notes: typing.Sequence[int],
	probability: float,
	rng: random.Random
) -> typing.List[notemaker.notes.Note]:

	"""Nudge some notes of a melody to a neighbouring scale tone.

	Each note moves, with ``probability`` percent chance, one scale tone up or
	down. An off-scale note moves to the scale tone just below or above it.
	Positions, lengths and expression are kept.

	Parameters:
		notes: Melody to vary
		scale_notes: Sorted scale pitches (see :func:`~notemaker.scales.expand_scale`)
		probability: Chance (0-100) that a note moves
		rng: Random number generator instance

	Returns:
		A new list of notes; the input is not modified
	"""

	if not scale_notes:
		raise notemaker.errors.InvalidScaleError("Scale notes cannot be empty")

	chance = _percent(probability)
	result: typing.List[notemaker.notes.Note] = []

	for note in notes:

		if not notemaker.sequence_utils.chance(chance, rng):
			result.append(note)
			continue

		direction = rng.choice([-1, 1])
		lower, higher = notemaker.scales.closest_lower_and_higher(note.pitch, scale_notes)

		if lower is not None and lower == higher:
			index = max(0, min(len(scale_notes) - 1, scale_notes.index(lower) + direction))
			target = scale_notes[index]

		elif direction < 0 and lower is not None:
			target = lower

		elif higher is not None:
			target = higher

		else:
			assert lower is not None
			target = lower

		result.append(dataclasses.replace(note, pitch=notemaker.sequence_utils.clamp_pitch(target)))

	return result
