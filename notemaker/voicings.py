"""Voice leading across a chord progression.

The revoicer keeps each chord's notes and pitch classes but moves individual
voices by whole octaves so consecutive chords connect smoothly. Every voice
of chord ``i`` is compared against the already revoiced chord ``i - 1``:

1. Each note tries octave shifts of -2..+2 and keeps the one closest to the
   nearest note of the previous chord. A pedal voice only looks at the
   previous chord's note with the same role.
2. Voices closer than ``min_interval`` are pulled apart by an octave.
3. Exact unisons are resolved by moving one voice up an octave.
4. If a voice still sits on the root, the root drops an octave.

The first chord is the reference and is returned untouched.

Example:
	```python
	import notemaker.notes
	import notemaker.voicings

	smooth = notemaker.voicings.revoice_chords(progression, min_interval=2)
	pedal = notemaker.voicings.revoice_chords(progression, pedal_role=notemaker.notes.Role.FIFTH)
	```
"""

import dataclasses
import logging
import typing

import notemaker.notes


logger = logging.getLogger(__name__)


DEFAULT_MIN_INTERVAL = 1
OCTAVE_SHIFTS = range(-2, 3)

# Upper bound on unison-resolution passes over a chord.
MAX_UNISON_PASSES = 32


def _closest_octave (pitch: int, references: typing.Sequence[int]) -> int:

	"""Return the octave shift of ``pitch`` nearest to any reference pitch.

	Ties keep the first candidate found (lowest shift, earliest reference).
	"""

	best_pitch = pitch
	best_distance: typing.Optional[int] = None

	for reference in references:
		for k in OCTAVE_SHIFTS:
			candidate = pitch + 12 * k
			distance = abs(candidate - reference)

			if best_distance is None or distance < best_distance:
				best_distance = distance
				best_pitch = candidate

	return best_pitch


def _spread_voices (pitches: typing.List[int], roles: typing.Sequence[typing.Optional[notemaker.notes.Role]], min_interval: int, pedal_role: typing.Optional[notemaker.notes.Role]) -> None:

	"""Push voices closer than ``min_interval`` apart by octaves, in place."""

	for j in range(len(pitches)):
		for k in range(j + 1, len(pitches)):

			if abs(pitches[j] - pitches[k]) >= min_interval:
				continue

			if pedal_role is not None and roles[j] == pedal_role:
				# Decision path: the pedal stays, the other voice moves away from it.
				pitches[k] += 12 if pitches[k] >= pitches[j] else -12

			elif pedal_role is not None and roles[k] == pedal_role:
				pitches[j] += 12 if pitches[j] >= pitches[k] else -12

			elif pitches[j] < pitches[k]:
				pitches[j] -= 12

			elif pitches[k] < pitches[j]:
				pitches[k] -= 12

			else:
				pitches[k] += 12


def _resolve_unisons (pitches: typing.List[int], roles: typing.Sequence[typing.Optional[notemaker.notes.Role]], pedal_role: typing.Optional[notemaker.notes.Role]) -> bool:

	"""Move voices off shared pitches, in place. Return False if passes ran out."""

	for _ in range(MAX_UNISON_PASSES):

		resolved = True

		for a in range(len(pitches)):
			for b in range(a + 1, len(pitches)):

				if pitches[a] != pitches[b]:
					continue

				resolved = False

				if pedal_role is not None and roles[b] == pedal_role and roles[a] != pedal_role:
					pitches[a] -= 12

				else:
					pitches[b] += 12

		if resolved:
			return True

	return False


def revoice_chord (
	chord: notemaker.notes.Chord,
	previous: notemaker.notes.Chord,
	min_interval: int = DEFAULT_MIN_INTERVAL,
	pedal_role: typing.Optional[notemaker.notes.Role] = None
) -> notemaker.notes.Chord:

	"""Revoice one chord against the chord before it.

	Parameters:
		chord: Chord to move
		previous: Already revoiced chord that precedes it
		min_interval: Smallest allowed distance between two voices (semitones)
		pedal_role: Role anchored to its own previous pitch, or None

	Returns:
		A new chord with the same notes at new octaves
	"""

	previous_pitches = previous.pitches()
	pedal_previous = previous.find(pedal_role) if pedal_role is not None else None

	pitches: typing.List[int] = []
	roles = [note.role for note in chord.notes]

	for note in chord.notes:

		if pedal_role is not None and note.role == pedal_role:

			if pedal_previous is None:
				# Decision path: no pedal in the previous chord to anchor to.
				pitches.append(note.pitch)

			else:
				pitches.append(_closest_octave(note.pitch, [pedal_previous.pitch]))

		elif previous_pitches:
			pitches.append(_closest_octave(note.pitch, previous_pitches))

		else:
			pitches.append(note.pitch)

	_spread_voices(pitches, roles, min_interval, pedal_role)

	if not _resolve_unisons(pitches, roles, pedal_role):
		logger.warning(f"Could not separate every voice of chord on degree {chord.degree}: {pitches}")

	if notemaker.notes.Role.ROOT in roles:

		root_index = roles.index(notemaker.notes.Role.ROOT)

		if any(i != root_index and p == pitches[root_index] for i, p in enumerate(pitches)):
			pitches[root_index] -= 12

	return chord.with_notes(
		dataclasses.replace(note, pitch=pitch)
		for note, pitch in zip(chord.notes, pitches)
	)


def revoice_chords (
	chords: typing.Sequence[notemaker.notes.Chord],
	min_interval: int = DEFAULT_MIN_INTERVAL,
	pedal_role: typing.Optional[notemaker.notes.Role] = None
) -> notemaker.notes.Progression:

	"""Revoice a progression for smooth voice leading.

	Parameters:
		chords: Progression to revoice
		min_interval: Smallest allowed distance between two voices (semitones).
			Adjustments are made in whole octaves only.
		pedal_role: Role held as a pedal tone, or None

	Returns:
		A new progression; the first chord is the input's first chord
	"""

	if not chords:
		return []

	result: notemaker.notes.Progression = [chords[0]]

	for chord in chords[1:]:
		result.append(revoice_chord(chord, result[-1], min_interval, pedal_role))

	return result
