import random
import typing

import pytest

import notemaker.scales


@pytest.fixture
def rng () -> random.Random:

	"""Seeded random generator so every run makes the same choices."""

	return random.Random(42)


@pytest.fixture
def major () -> typing.List[int]:

	"""Steps of the major scale."""

	return notemaker.scales.get_intervals("Major")


@pytest.fixture
def c_major_notes (major: typing.List[int]) -> typing.List[int]:

	"""Every C major pitch in the MIDI range."""

	return notemaker.scales.expand_scale(60, major)
