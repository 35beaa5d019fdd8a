"""Snap the notes of a step grid onto a scale.

Notes are grouped into columns, one per step. Each column is corrected on its
own, from the lowest pitch up:

- notes already in the scale stay where they are and reserve their pitch
- an off-scale note moves to the nearer of the scale tones just below and
  above it, preferring a tone that is neither reserved nor already in the
  column
- when both neighbours are reserved, the note moves to the nearest scale tone
  overall (ties resolve downward)
- the chosen target is reserved, so two notes of one column never merge

If no free target remains, the note is left where it is.

Example:
	```python
	import notemaker.quantizer

	grid = notemaker.quantizer.StepGrid()
	grid.observe(0, 61, notemaker.quantizer.STEP_NOTE_ON)
	grid.observe(0, 63, notemaker.quantizer.STEP_NOTE_ON)

	notemaker.quantizer.fit_to_scale(grid, 0, [2, 2, 1, 2, 2, 2, 1])
	# [PitchCorrection(step=0, pitch=61, delta=-1), PitchCorrection(step=0, pitch=63, delta=-1)]
	```
"""

import dataclasses
import logging
import typing

import notemaker.errors
import notemaker.scales


logger = logging.getLogger(__name__)


# Step states reported by a grid observer.
STEP_EMPTY = 0
STEP_NOTE_ON = 1
STEP_NOTE_SUSTAIN = 2

# Scales are anchored on middle C plus the key.
QUANTIZE_BASE_NOTE = 60

Columns = typing.Mapping[int, typing.Iterable[int]]


@dataclasses.dataclass(frozen=True)
class PitchCorrection:

	"""
	A move of one note: the step it sits on, its current pitch and the
	number of semitones to shift it by.
	"""

	step: int
	pitch: int
	delta: int


	@property
	def target (self) -> int:

		return self.pitch + self.delta


def _closest (pitch: int, candidates: typing.Sequence[int]) -> int:

	"""Return the candidate nearest to ``pitch``; ties keep the earlier one."""

	best = candidates[0]

	for candidate in candidates[1:]:
		if abs(candidate - pitch) < abs(best - pitch):
			best = candidate

	return best


def _target_for (pitch: int, column: typing.Sequence[int], reserved: typing.Set[int], scale_notes: typing.Sequence[int]) -> int:

	"""Pick the pitch an off-scale note should move to.

	Raises:
		RangeExhaustionError: If every candidate is already reserved.
	"""

	lower, higher = notemaker.scales.closest_lower_and_higher(pitch, scale_notes)
	candidates = [c for c in (lower, higher) if c is not None]

	if not candidates:
		raise notemaker.errors.RangeExhaustionError(f"No scale tone around {pitch}")

	free = [c for c in candidates if c not in reserved and c not in column]

	if free:
		return _closest(pitch, free)

	unreserved = [c for c in candidates if c not in reserved]

	if unreserved:
		# Decision path: the neighbour is already in the column but not yet claimed.
		return _closest(pitch, unreserved)

	target = notemaker.scales.nearest_scale_note(pitch, scale_notes)

	if target in reserved:
		raise notemaker.errors.RangeExhaustionError(f"Every target for {pitch} is taken")

	return target


def quantize_column (step: int, pitches: typing.Iterable[int], scale_notes: typing.Sequence[int]) -> typing.List[PitchCorrection]:

	"""Correct the pitches of a single step."""

	column = sorted(set(pitches))
	scale_set = set(scale_notes)
	reserved: typing.Set[int] = set()
	corrections: typing.List[PitchCorrection] = []

	for pitch in column:

		if pitch in scale_set:
			reserved.add(pitch)
			continue

		try:
			target = _target_for(pitch, column, reserved, scale_notes)

		except notemaker.errors.RangeExhaustionError as exc:
			logger.debug(f"Step {step}: {exc}, leaving the note unmoved")
			continue

		reserved.add(target)

		if target != pitch:
			corrections.append(PitchCorrection(step=step, pitch=pitch, delta=target - pitch))

	return corrections


def quantize_columns (columns: Columns, scale_notes: typing.Sequence[int]) -> typing.List[PitchCorrection]:

	"""Correct every column of a step grid.

	Parameters:
		columns: Mapping of step to the pitches present on that step
		scale_notes: Sorted scale pitches (see :func:`~notemaker.scales.expand_scale`)

	Returns:
		One correction per note that moves, ordered by step then pitch.
		Notes already in the scale produce nothing.
	"""

	if not scale_notes:
		raise notemaker.errors.InvalidScaleError("Scale notes cannot be empty")

	corrections: typing.List[PitchCorrection] = []

	for step in sorted(columns):
		corrections.extend(quantize_column(step, columns[step], scale_notes))

	return corrections


class StepGrid:

	"""
	Running picture of which pitches sit on which steps of a clip.

	Feed it the (step, pitch, state) reports of a step-data observer. A state
	of ``STEP_EMPTY`` removes the note; any other state records it.
	"""

	def __init__ (self) -> None:

		self._columns: typing.Dict[int, typing.Dict[int, int]] = {}


	def observe (self, x: int, y: int, state: int) -> None:

		"""Record the state of the note at step ``x``, pitch ``y``."""

		if state == STEP_EMPTY:

			column = self._columns.get(x)

			if column is not None:
				column.pop(y, None)
				if not column:
					del self._columns[x]

			return

		self._columns.setdefault(x, {})[y] = state


	def clear (self) -> None:

		"""Forget every note."""

		self._columns.clear()


	def columns (self) -> typing.Dict[int, typing.List[int]]:

		"""Return the step to sorted-pitches map of every note present."""

		return {x: sorted(column) for x, column in sorted(self._columns.items())}


	def __len__ (self) -> int:

		return sum(len(column) for column in self._columns.values())


	def apply (self, corrections: typing.Iterable[PitchCorrection]) -> None:

		"""Move the recorded notes as the corrections say, keeping their state."""

		for correction in corrections:

			column = self._columns.get(correction.step)

			if column is None or correction.pitch not in column:
				continue

			column[correction.target] = column.pop(correction.pitch)


def fit_to_scale (grid: StepGrid, root: int, steps: typing.Sequence[int]) -> typing.List[PitchCorrection]:

	"""Work out the corrections that bring a grid into a key and scale.

	Parameters:
		grid: Observed notes
		root: Key pitch class (0 = C)
		steps: Scale steps of the mode

	Returns:
		The corrections to apply; the grid itself is not changed
	"""

	scale_notes = notemaker.scales.expand_scale(QUANTIZE_BASE_NOTE + root, steps)
	corrections = quantize_columns(grid.columns(), scale_notes)

	logger.info(f"Quantize: {len(corrections)} of {len(grid)} notes moved")

	return corrections
