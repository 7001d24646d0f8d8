import logging

from amrgen.generation.hyperparameters import Hyperparameters
from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.pos import simplify_pos
from amrgen.oracles.syntactic_annotation_oracle import SyntacticAnnotationOracle
from amrgen.oracles.transitions import SYNTACTIC_ANNOTATION_KEYS

logger = logging.getLogger(__name__)


class SyntacticAnnotator:
    """
    Stores the n-best part of speech, number, voice and tense of every vertex in
    `vertex.predictions`, where the second stage picks them up.  An annotation without any
    prediction is left out, except that PropBank framesets always get a (possibly empty)
    `pos` list.  Links share the number predictions and the tag of their original.
    """

    def __init__(self, oracle: SyntacticAnnotationOracle, hyperparameters: Hyperparameters) -> None:
        self.oracle = oracle
        self.hyperparameters = hyperparameters

    def annotate(self, graph: AmrGraph) -> None:
        vertices = list(graph)
        for vertex in vertices:
            if vertex.is_link:
                continue
            for key in SYNTACTIC_ANNOTATION_KEYS:
                n_best = self.hyperparameters.annotation_n_best(key)
                selected = n_best.select(self.oracle.predict(vertex, graph, key))
                if selected or (key == "pos" and vertex.is_propbank_entry):
                    vertex.predictions[key] = selected

        for vertex in vertices:
            if not vertex.is_link:
                continue
            original = vertex.annotation.original
            if "number" in original.predictions:
                vertex.predictions["number"] = original.predictions["number"]
            vertex.pos = simplify_pos(original.pos, vertex.is_propbank_entry)
