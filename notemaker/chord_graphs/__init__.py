"""
Scale-degree transition graphs for chord progressions.

Nodes are diatonic scale degrees, 0 (I) to 6 (vii). A graph only decides
which degree follows which; the progression generator turns degrees into
chords for whatever root and mode it is given.
"""

import abc
import typing

import notemaker.errors
import notemaker.weighted_graph


TONIC = 0
SUPERTONIC = 1
MEDIANT = 2
SUBDOMINANT = 3
DOMINANT = 4
SUBMEDIANT = 5
LEADING = 6

DEGREE_COUNT = 7

DEGREE_NAMES: typing.List[str] = ["I", "ii", "iii", "IV", "V", "vi", "vii°"]


TransitionTable = typing.Dict[int, typing.List[typing.Tuple[int, float]]]


class ChordGraph (abc.ABC):

	"""Abstract base for degree transition graphs."""

	@abc.abstractmethod
	def build (self) -> typing.Tuple[notemaker.weighted_graph.WeightedGraph[int], int]:

		"""Build the weighted graph and return it with the starting degree."""

		...


def graph_from_table (table: TransitionTable) -> notemaker.weighted_graph.WeightedGraph[int]:

	"""Build a weighted graph from ``{source: [(target, weight), ...]}``.

	Parameters:
		table: Outgoing weighted edges per degree

	Returns:
		WeightedGraph over integer degrees

	Raises:
		InvalidParameterError: If an edge names a degree outside 0-6
	"""

	graph: notemaker.weighted_graph.WeightedGraph[int] = notemaker.weighted_graph.WeightedGraph()

	for source, edges in table.items():
		for target, weight in edges:
			graph.add_transition(source, target, weight)

	unknown = sorted(node for node in graph.nodes() if not 0 <= node < DEGREE_COUNT)

	if unknown:
		raise notemaker.errors.InvalidParameterError(f"Transition table names degrees outside 0-{DEGREE_COUNT - 1}: {unknown}")

	return graph


def degree_name (degree: int) -> str:

	"""Return the roman numeral for a degree (wraps past vii)."""

	return DEGREE_NAMES[degree % DEGREE_COUNT]
