import random
import typing

import notemaker.errors
import notemaker.sequence_utils


NodeType = typing.TypeVar("NodeType")
WeightModifierType = typing.Optional[typing.Callable[[NodeType, NodeType, float], float]]


class WeightedGraph (typing.Generic[NodeType]):

	"""
	A weighted directed graph with optional runtime weight adjustment.
	"""

	def __init__ (self) -> None:

		"""
		Initialize an empty weighted graph.
		"""

		self._edges: typing.Dict[NodeType, typing.Dict[NodeType, float]] = {}


	def add_transition (self, source: NodeType, target: NodeType, weight: float) -> None:

		"""
		Add a weighted transition between two nodes.
		"""

		if weight <= 0:
			raise notemaker.errors.InvalidParameterError("Weight must be positive")

		if source not in self._edges:
			self._edges[source] = {}

		# If a transition already exists, accumulate to strengthen the edge.
		if target in self._edges[source]:
			self._edges[source][target] += weight

		else:
			self._edges[source][target] = weight


	def get_transitions (self, source: NodeType) -> typing.List[typing.Tuple[NodeType, float]]:

		"""
		Return weighted transitions for a source node.
		"""

		if source not in self._edges:
			return []

		return list(self._edges[source].items())


	def nodes (self) -> typing.Set[NodeType]:

		"""
		Return every node that appears as a source or a target.
		"""

		found: typing.Set[NodeType] = set(self._edges)

		for targets in self._edges.values():
			found.update(targets)

		return found


	def choose_next (self, source: NodeType, rng: random.Random, weight_modifier: WeightModifierType = None) -> NodeType:

		"""
		Choose the next node from a source using weighted randomness.
		"""

		options = self.get_transitions(source)

		if not options:
			# Decision path: with no outgoing edges we remain on the current node.
			return source

		targets: typing.List[NodeType] = []
		weights: typing.List[float] = []

		for target, weight in options:

			if weight_modifier is None:
				modifier = 1.0

			else:
				modifier = float(weight_modifier(source, target, weight))

			if modifier <= 0:
				# Decision path: non-positive modifiers suppress this transition entirely.
				continue

			targets.append(target)
			weights.append(float(weight) * modifier)

		if not targets:
			# Decision path: if every transition is suppressed, stay on the current node.
			return source

		return targets[notemaker.sequence_utils.weighted_index(weights, rng)]
