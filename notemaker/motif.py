"""Short melodic fragments and their transformations.

A motif is a handful of recent melody notes stored as pitch, velocity and
length. Transformations work in **scale steps** against the melody's legal
pitch list (every scale tone inside the register), so a transformed motif
always stays in key and in range.

Transformations:
- ``transpose`` - move every note by the same number of scale steps
- ``invert`` - mirror the contour around the first note
- ``retrograde`` - play the notes backwards
- ``octave_shift`` - move the whole motif an octave, if it still fits
"""

import dataclasses
import logging
import random
import typing

import notemaker.errors
import notemaker.scales


logger = logging.getLogger(__name__)


MOTIF_MIN_NOTES = 3
MOTIF_MAX_NOTES = 5
TRANSPOSE_STEPS = [-2, -1, 1, 2]


@dataclasses.dataclass(frozen=True)
class MotifNote:

	"""
	A motif note: pitch, velocity and length in quarter notes.
	"""

	pitch: int
	velocity: int
	length: float


def extract_motif (history: typing.Sequence[MotifNote], rng: random.Random) -> typing.List[MotifNote]:

	"""Take the last 3-5 notes of a history as a motif.

	Returns an empty list if the history holds fewer than three notes.
	"""

	if len(history) < MOTIF_MIN_NOTES:
		return []

	size = min(len(history), rng.randint(MOTIF_MIN_NOTES, MOTIF_MAX_NOTES))

	return list(history[-size:])


def _snap (pitch: int, scale_notes: typing.Sequence[int]) -> int:

	"""Snap a pitch onto the legal scale tones."""

	return notemaker.scales.nearest_scale_note(pitch, scale_notes)


def _index_of (pitch: int, scale_notes: typing.Sequence[int]) -> int:

	"""Return the scale-list index of the legal tone nearest to a pitch."""

	return scale_notes.index(_snap(pitch, scale_notes))


def transpose (motif: typing.Sequence[MotifNote], steps: int, scale_notes: typing.Sequence[int]) -> typing.List[MotifNote]:

	"""Move every note by ``steps`` scale tones, clamped to the legal range."""

	top = len(scale_notes) - 1

	return [
		dataclasses.replace(note, pitch=scale_notes[max(0, min(top, _index_of(note.pitch, scale_notes) + steps))])
		for note in motif
	]


def invert (motif: typing.Sequence[MotifNote], scale_notes: typing.Sequence[int]) -> typing.List[MotifNote]:

	"""Mirror each interval around the first note, then snap back into the scale."""

	if not motif:
		return []

	axis = motif[0].pitch

	return [
		dataclasses.replace(note, pitch=_snap(axis - (note.pitch - axis), scale_notes))
		for note in motif
	]


def retrograde (motif: typing.Sequence[MotifNote]) -> typing.List[MotifNote]:

	"""Return the notes in reverse order."""

	return list(reversed(motif))


def octave_shift (motif: typing.Sequence[MotifNote], scale_notes: typing.Sequence[int], direction: int) -> typing.List[MotifNote]:

	"""Move the motif an octave up (``direction`` > 0) or down.

	Raises:
		RangeExhaustionError: If any shifted note would leave the legal
			pitch list.
	"""

	offset = 12 if direction > 0 else -12
	legal = set(scale_notes)
	shifted = [dataclasses.replace(note, pitch=note.pitch + offset) for note in motif]

	if any(note.pitch not in legal for note in shifted):
		raise notemaker.errors.RangeExhaustionError(f"Motif does not fit {offset:+d} semitones away")

	return shifted


def develop (motif: typing.Sequence[MotifNote], scale_notes: typing.Sequence[int], rng: random.Random) -> typing.List[MotifNote]:

	"""Apply one randomly chosen transformation and snap the result into the scale.

	An octave shift that does not fit tries the other direction, then leaves
	the motif unchanged.

	Example:
		```python
		motif = extract_motif(history, rng)
		variation = develop(motif, legal_pitches, rng)
		```
	"""

	if not motif:
		return []

	if not scale_notes:
		raise notemaker.errors.InvalidScaleError("Scale notes cannot be empty")

	operation = rng.choice(["transpose", "invert", "retrograde", "octave"])

	if operation == "transpose":
		result = transpose(motif, rng.choice(TRANSPOSE_STEPS), scale_notes)

	elif operation == "invert":
		result = invert(motif, scale_notes)

	elif operation == "retrograde":
		result = retrograde(motif)

	else:
		direction = rng.choice([-1, 1])
		try:
			result = octave_shift(motif, scale_notes, direction)
		except notemaker.errors.RangeExhaustionError:
			try:
				result = octave_shift(motif, scale_notes, -direction)
			except notemaker.errors.RangeExhaustionError:
				logger.debug("Motif fits no octave shift, keeping it in place")
				result = list(motif)

	return [dataclasses.replace(note, pitch=_snap(note.pitch, scale_notes)) for note in result]
