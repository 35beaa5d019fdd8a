import random
import typing

import notemaker.constants
import notemaker.constants.velocity
import notemaker.errors

T = typing.TypeVar("T")


def weighted_index (weights: typing.Sequence[float], rng: random.Random) -> int:

	"""Pick an index from a list of relative weights.

	A uniform value is drawn from ``[0, sum(weights))`` and the first index
	whose running total exceeds it is returned, so zero-weight entries are
	never chosen.

	Parameters:
		weights: Non-negative relative weights
		rng: Random number generator instance

	Raises:
		InvalidParameterError: If the list is empty, holds a negative weight
			or every weight is zero.

	Example:
		```python
		weighted_index([0, 0, 10, 0], rng)  # always 2
		```
	"""

	if not weights:
		raise notemaker.errors.InvalidParameterError("Weights cannot be empty")

	total = 0.0

	for weight in weights:
		if weight < 0:
			raise notemaker.errors.InvalidParameterError(f"Weights cannot be negative: {list(weights)}")
		total += weight

	if total <= 0:
		raise notemaker.errors.InvalidParameterError("At least one weight must be positive")

	threshold = rng.random() * total
	cumulative = 0.0

	for index, weight in enumerate(weights):
		cumulative += weight
		if cumulative > threshold:
			return index

	# Floating point rounding can leave the threshold just above the total.
	return max(i for i, weight in enumerate(weights) if weight > 0)


def weighted_choice (options: typing.Sequence[typing.Tuple[T, float]], rng: random.Random) -> T:

	"""Pick one item from a list of (value, weight) pairs.

	Weights are relative - they don't need to sum to 1.0.

	Example:
		```python
		length = weighted_choice([(0.25, 70), (0.5, 20), (1.0, 10)], rng)
		```
	"""

	if not options:
		raise notemaker.errors.InvalidParameterError("Options list cannot be empty")

	index = weighted_index([weight for _, weight in options], rng)

	return options[index][0]


def chance (percent: float, rng: random.Random) -> bool:

	"""Return True with the given probability, expressed as 0-100."""

	return rng.random() * 100 < percent


def clamp (value: float, low: float, high: float) -> float:

	"""Clamp a value into ``[low, high]``."""

	return max(low, min(high, value))


def clamp_pitch (pitch: int) -> int:

	"""Clamp a pitch into the MIDI note range."""

	return int(clamp(pitch, notemaker.constants.MIDI_NOTE_MIN, notemaker.constants.MIDI_NOTE_MAX))


def clamp_velocity (velocity: float) -> int:

	"""Round and clamp a velocity into the audible MIDI range (1-127)."""

	return int(clamp(round(velocity), notemaker.constants.velocity.MIN_VELOCITY, notemaker.constants.velocity.MAX_VELOCITY))


def blend (baseline: float, random_value: float, amount: float) -> float:

	"""Linearly blend a fixed baseline with a random value.

	``amount`` of 0.0 returns the baseline, 1.0 returns the random value.
	"""

	amount = clamp(amount, 0.0, 1.0)

	return baseline * (1.0 - amount) + random_value * amount
