import typing

import notemaker.chord_graphs
import notemaker.weighted_graph


I = notemaker.chord_graphs.TONIC
II = notemaker.chord_graphs.SUPERTONIC
III = notemaker.chord_graphs.MEDIANT
IV = notemaker.chord_graphs.SUBDOMINANT
V = notemaker.chord_graphs.DOMINANT
VI = notemaker.chord_graphs.SUBMEDIANT
VII = notemaker.chord_graphs.LEADING


# Higher numbers mean more likely transitions.
DIATONIC_FLOW: notemaker.chord_graphs.TransitionTable = {
	I: [(II, 15), (III, 10), (IV, 30), (V, 35), (VI, 10)],	# strong tendency to V and IV
	II: [(V, 80), (I, 20)],
	III: [(VI, 70), (IV, 30)],
	IV: [(I, 20), (V, 50), (II, 30)],
	V: [(I, 80), (VI, 20)],
	VI: [(II, 30), (IV, 30), (V, 40)],
	VII: [(I, 90), (V, 10)],
}


class DiatonicFlow (notemaker.chord_graphs.ChordGraph):

	"""
	Functional diatonic flow: predominants lead to V, V resolves to I.
	"""

	def __init__ (self, table: typing.Optional[notemaker.chord_graphs.TransitionTable] = None, start: int = I) -> None:

		"""
		Use the built-in table unless a custom one is supplied.
		"""

		self.table = table if table is not None else DIATONIC_FLOW
		self.start = start


	def build (self) -> typing.Tuple[notemaker.weighted_graph.WeightedGraph[int], int]:

		"""
		Build the graph and return it with the starting degree.
		"""

		return notemaker.chord_graphs.graph_from_table(self.table), self.start
