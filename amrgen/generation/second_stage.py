import logging
import math
import re
from typing import Dict, List, Optional, Sequence, Tuple

from amrgen.common.checks import GraphStructureError
from amrgen.common.util import MIN_LOG_PROB, collapse_spaces, log_prob
from amrgen.generation.candidate_list import CandidateList
from amrgen.generation.hyperparameters import Hyperparameters
from amrgen.generation.partial_transition_function import PartialTransitionFunction
from amrgen.generation.prediction import Prediction
from amrgen.generation.reordering import ReorderingScorer
from amrgen.graph import word_lists
from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.edge import Edge
from amrgen.graph.pos import POS_ANY, POS_CATEGORIES
from amrgen.graph.vertex import EMPTY_VERTEX, Vertex
from amrgen.oracles.default_realizer import SyntacticAnnotation
from amrgen.oracles.generation_models import GenerationModels
from amrgen.oracles.transitions import FUTURE, PASSIVE, PRESENT

logger = logging.getLogger(__name__)

_ARGUMENT_LABEL = re.compile(r":ARG[0-9]")
_NO_ARTICLE_TAGS = frozenset(["IN", "DT", "PRP", "PRP$"])

# Words inserted after the child of a `:domain` edge, when the parent is not "possible".
_DOMAIN_COPULAS = [("", 0.33), ("are", 0.33), ("is", 0.33)]
_IMPERATIVE_DOMAIN_COPULAS = [("be", 1.0)]
_NOTHING = [("", 1.0)]

Order = List[Edge]


class RealizationSearchProcessor:
    """
    The second generation stage: a bottom-up search over the realization of every subtree.

    For each vertex the search combines candidate realizations of the concept with an
    article, the realizations of its children, the order of children and concept, and
    function words inserted around the children.  Each combination is scored by the oracles
    and rescored by the language model, and only a beam of the best survives at every
    vertex.  The best candidate of the root describes the sentence.

    A processor holds caches that are only valid for one graph, so a new one is created for
    every call to `generate`.
    """

    def __init__(self, models: GenerationModels, hyperparameters: Hyperparameters) -> None:
        self.models = models
        self.hyperparameters = hyperparameters
        self.graph: Optional[AmrGraph] = None
        self.reordering_scorer: Optional[ReorderingScorer] = None

    def generate(self, graph: AmrGraph) -> Optional[Prediction]:
        if graph.root is None:
            raise GraphStructureError("the graph has no root")
        self.graph = graph
        self.reordering_scorer = ReorderingScorer(
            self.models.reorder,
            graph,
            self.hyperparameters.reordering,
            self.hyperparameters.max_out_degree,
        )
        root = graph.root

        if root.instance == word_lists.MULTI_SENTENCE:
            return self._generate_multi_sentence(root)

        return self.get_best(root).best()

    def _generate_multi_sentence(self, root: Vertex) -> Optional[Prediction]:
        order = sorted(root.outgoing, key=lambda edge: edge.label)
        ptf = PartialTransitionFunction()
        ptf.reordering[root.index] = order
        texts: List[str] = []
        score = 0.0
        lm_free_score = 0.0
        for edge in order:
            if edge.is_instance_edge:
                continue
            best = self.get_best(edge.target).best()
            if best is None:
                return None
            texts.append(best.value)
            score += best.score
            lm_free_score += best.lm_free_score
            ptf = ptf.union(best.partial_transition_function)
        return Prediction(collapse_spaces(" ".join(texts)), score, lm_free_score, ptf)

    def get_best(self, vertex: Vertex) -> CandidateList:
        """
        Computes the candidate realizations of the subtree rooted at `vertex`, after those
        of all of its children, and stores them in `vertex.predictions["realization"]`.
        """
        hyperparameters = self.hyperparameters
        apply_punctuation = False
        is_last = True
        if vertex.instance != word_lists.MULTI_SENTENCE:
            incoming = vertex.incoming_edge
            if incoming is None or incoming.source.instance == word_lists.MULTI_SENTENCE:
                apply_punctuation = True
                if incoming is not None:
                    is_last = incoming is incoming.source.outgoing[-1]

        child_edges = vertex.child_edges()
        for edge in child_edges:
            self.get_best(edge.target)

        realizations = list(self.realize(vertex))
        if not realizations:
            logger.warning_once(f"no realization found for {vertex.instance}")
            realizations = [self._placeholder(vertex)]

        best = CandidateList(hyperparameters.max_predictions_per_vertex)
        for realization in realizations:
            if vertex.is_propbank_entry:
                vertex.pos = realization.ptf.pos.get(vertex.index, POS_ANY)
            realization = self._insert_child(vertex, realization)
            child_insertions = realization.ptf.child_insertions.get(vertex.index, [])

            children = child_edges + child_insertions
            if not children:
                # Leaves keep their realization as is, without an article.
                best.insert_or_merge(realization)
                continue
            if vertex.is_deleted and len(children) == 1:
                orders = [(children, 1.0)]
            else:
                orders = self.reordering_scorer.n_best_reorderings(
                    vertex,
                    child_insertions,
                    realization.ptf.realization.get(vertex.index),
                    realization.ptf.voice.get(vertex.index),
                )

            for order, order_probability in orders:
                composed = self._compose(vertex, order, realization, realizations)
                reordering_score = hyperparameters.reordering_weight * log_prob(order_probability)
                for prediction in composed:
                    ptf = PartialTransitionFunction()
                    ptf.reordering[vertex.index] = order
                    best.insert_or_merge(
                        Prediction(
                            prediction.value,
                            prediction.score + reordering_score,
                            prediction.lm_free_score + reordering_score,
                            prediction.ptf.union(ptf),
                        )
                    )

        finished = list(best)
        if apply_punctuation:
            finished = [
                self._punctuate(vertex, prediction, is_last) for prediction in finished
            ]
        finished = [self._strip_article(vertex, prediction) for prediction in finished]
        result = CandidateList(hyperparameters.max_predictions_per_vertex)
        result.add_all(finished)
        vertex.predictions["realization"] = result
        return result

    def _placeholder(self, vertex: Vertex) -> Prediction:
        ptf = PartialTransitionFunction()
        ptf.pos[vertex.index] = POS_ANY
        ptf.realization[vertex.index] = ""
        return Prediction("", MIN_LOG_PROB, partial_transition_function=ptf)

    def _punctuate(self, vertex: Vertex, prediction: Prediction, is_last: bool) -> Prediction:
        if vertex.mode == "interrogative" or any(
            child.instance == word_lists.AMR_UNKNOWN for child in vertex.children()
        ):
            mark = "?"
        elif len(prediction.value.split(" ")) > 4 or is_last:
            mark = "."
        else:
            mark = ","
        ptf = PartialTransitionFunction()
        ptf.punctuation[vertex.index] = mark
        return prediction.with_value(
            collapse_spaces(f"{prediction.value} {mark}"), prediction.ptf.union(ptf)
        )

    def _strip_article(self, vertex: Vertex, prediction: Prediction) -> Prediction:
        ptf = prediction.ptf
        if not ptf.denominator.get(vertex.index) or ptf.pos.get(vertex.index) == "NN":
            return prediction
        words = prediction.value.split(" ", 1)
        if len(words) < 2 or words[0] not in word_lists.ARTICLES:
            return prediction
        cleared = ptf.copy()
        cleared.denominator[vertex.index] = ""
        return prediction.with_value(words[1], cleared)

    def _insert_child(self, vertex: Vertex, realization: Prediction) -> Prediction:
        if (
            not vertex.is_propbank_entry
            or vertex.is_link
            or vertex.is_deleted
            or vertex.instance_edge is None
        ):
            return realization
        ptf = realization.ptf
        candidates = self.models.child_insertion.predict(
            vertex, self.graph, ptf.realization.get(vertex.index), ptf.voice.get(vertex.index)
        )
        if not candidates:
            return realization
        word = max(candidates, key=lambda candidate: candidate[1])[0]
        if not word:
            return realization

        edge = self.graph.insert_child(vertex, word)
        child = edge.target
        child.predictions["realization"] = self._realize_given_pos(child)
        child.pos = POS_ANY
        insertion = PartialTransitionFunction()
        insertion.child_insertions[vertex.index] = [edge]
        insertion.pos[child.index] = POS_ANY
        logger.debug(f"inserted {word!r} below {vertex}")
        return realization.with_value(realization.value, ptf.union(insertion))

    def _compose(
        self,
        vertex: Vertex,
        order: Order,
        realization: Prediction,
        realizations: Sequence[Prediction],
    ) -> CandidateList:
        composed = self._denominators(vertex, realization, realizations)
        instance_edge = vertex.instance_edge
        for edge in order:
            if edge.is_instance_edge:
                if vertex.is_deleted:
                    continue
                next_predictions = [realization]
            elif edge.target is EMPTY_VERTEX:
                continue
            else:
                children = CandidateList(self.hyperparameters.max_realization_predictions)
                children.add_all(edge.target.predictions.get("realization", []))
                next_predictions = list(children)
            composed = self._append(
                order, composed, next_predictions, edge, instance_edge, realization.value
            )
        return composed

    def _denominators(
        self, vertex: Vertex, realization: Prediction, realizations: Sequence[Prediction]
    ) -> CandidateList:
        hyperparameters = self.hyperparameters
        candidates = CandidateList(hyperparameters.max_predictions_per_vertex)
        ptf = realization.ptf
        scored = self.models.denominator.predict(
            vertex, self.graph, ptf.number.get(vertex.index), ptf.realization.get(vertex.index)
        )
        if not (
            self._article_disallowed(vertex)
            or vertex.instance in word_lists.NO_ALIGNMENT_CONCEPTS
            or (len(realizations) == 1 and realizations[0].value == "")
        ):
            for article, probability in hyperparameters.denominator.select(scored):
                article = article.replace("-", "")
                denominator = PartialTransitionFunction()
                denominator.denominator[vertex.index] = article
                candidates.insert_or_merge(
                    Prediction(
                        article,
                        hyperparameters.denominator_weight * log_prob(probability),
                        partial_transition_function=denominator,
                    )
                )
        if not len(candidates):
            denominator = PartialTransitionFunction()
            denominator.denominator[vertex.index] = ""
            candidates.insert_or_merge(Prediction("", 0.0, partial_transition_function=denominator))
        return candidates

    def _article_disallowed(self, vertex: Vertex) -> bool:
        for edge in vertex.child_edges():
            child = edge.target
            if edge.label == ":mod":
                if not child.is_propbank_entry and child.pos in _NO_ARTICLE_TAGS:
                    return True
            if edge.label == ":poss":
                if child.is_link or child.instance in word_lists.PRONOUNS:
                    return True
            if edge.label in (":ARG0", ":mod") and child.instance in word_lists.PRONOUNS:
                return True
            if edge.label == ":quant":
                return True
        return False

    def _append(
        self,
        order: Order,
        accumulated: CandidateList,
        next_predictions: List[Prediction],
        edge: Edge,
        instance_edge: Optional[Edge],
        vertex_realization: str,
    ) -> CandidateList:
        hyperparameters = self.hyperparameters
        result = CandidateList(hyperparameters.max_predictions_per_vertex)
        if not next_predictions:
            owner = edge.source if edge.is_instance_edge else edge.target
            next_predictions = [self._placeholder(owner)]

        source = edge.source
        target = edge.target
        after_insertions = _NOTHING
        if not edge.is_instance_edge and edge.label == ":domain":
            if source.instance != "possible":
                if source.mode == "imperative":
                    after_insertions = _IMPERATIVE_DOMAIN_COPULAS
                else:
                    after_insertions = _DOMAIN_COPULAS

        is_end = order.index(edge) == len(order) - 1
        relative_position = self._relative_position(order, edge, instance_edge, source)

        for accumulated_prediction in accumulated:
            source_realization = accumulated_prediction.ptf.realization.get(source.index)
            for next_prediction in next_predictions:
                if target.is_propbank_entry:
                    target.pos = next_prediction.ptf.pos.get(target.index, POS_ANY)

                before, after, is_argument = self._insertions(
                    edge,
                    relative_position,
                    source_realization,
                    vertex_realization,
                    next_prediction,
                    after_insertions,
                )
                before_weight = (
                    hyperparameters.before_argument_insertion_weight
                    if is_argument
                    else hyperparameters.before_insertion_weight
                )

                for before_text, before_probability in before:
                    for after_text, after_probability in after:
                        text = collapse_spaces(
                            f"{accumulated_prediction.value} {before_text} "
                            f"{next_prediction.value} {after_text}"
                        ).lower()
                        lm_free_score = (
                            accumulated_prediction.lm_free_score
                            + next_prediction.lm_free_score
                            + before_weight * log_prob(before_probability)
                            + hyperparameters.after_insertion_weight * log_prob(after_probability)
                        )
                        score = lm_free_score + hyperparameters.lm_weight * self.score_sentence(
                            text, True, is_end
                        )
                        ptf = PartialTransitionFunction()
                        if not edge.is_instance_edge:
                            ptf.before_insertions[target.index] = before_text
                            ptf.after_insertions[target.index] = after_text
                        ptf = ptf.union(accumulated_prediction.ptf).union(next_prediction.ptf)
                        result.insert_or_merge(Prediction(text, score, lm_free_score, ptf))
        return result

    def _insertions(
        self,
        edge: Edge,
        relative_position: str,
        source_realization: Optional[str],
        vertex_realization: str,
        next_prediction: Prediction,
        after_insertions: List[Tuple[str, float]],
    ) -> Tuple[List[Tuple[str, float]], List[Tuple[str, float]], bool]:
        """
        The words to insert before and after the child of `edge`, and whether the
        insertion before it is an argument insertion.
        """
        if (
            edge.is_instance_edge
            or next_prediction.value == ""
            or vertex_realization == ""
            or edge.is_inserted
        ):
            return _NOTHING, _NOTHING, False

        hyperparameters = self.hyperparameters
        target = edge.target
        if (
            _ARGUMENT_LABEL.fullmatch(edge.label)
            and not target.is_link
            and not edge.source.is_deleted
            and source_realization
        ):
            before = hyperparameters.argument_insertion.select(
                self.models.argument_insertion.score_insertion(
                    edge, relative_position, source_realization, next_prediction.value, self.graph
                )
            )
            return before or _NOTHING, after_insertions, True
        if not _ARGUMENT_LABEL.fullmatch(edge.label) and not target.is_link:
            before = hyperparameters.other_insertion.select(
                self.models.other_insertion.score_insertion(
                    edge, relative_position, source_realization, next_prediction.value, self.graph
                )
            )
            return before or _NOTHING, after_insertions, False
        return _NOTHING, after_insertions, False

    @staticmethod
    def _relative_position(
        order: Order, edge: Edge, instance_edge: Optional[Edge], source: Vertex
    ) -> str:
        if instance_edge is None or source.is_deleted or instance_edge not in order:
            return "d"
        if order.index(edge) > order.index(instance_edge):
            return "r"
        return "l"

    def score_sentence(self, text: str, start_bounded: bool, end_bounded: bool) -> float:
        """
        The language model score of `text`, normalized by its length.  Articles count
        `article_lm_weight` words each.  The empty text is scored as a single empty word.
        """
        tokens = text.split(" ")
        articles = sum(1 for token in tokens if token in word_lists.ARTICLES)
        length = len(tokens) - articles + articles * self.hyperparameters.article_lm_weight
        log_probability = self.models.language_model.score_sentence(
            tokens, start_bounded, end_bounded
        )
        return log_probability / length

    def realize(self, vertex: Vertex) -> CandidateList:
        """
        The candidate realizations of the concept of `vertex` alone, over all of its
        syntactic annotations.
        """
        hyperparameters = self.hyperparameters
        predictions = CandidateList(hyperparameters.max_realization_predictions)

        if vertex.is_link:
            for text in self.models.default_realizer.realize(vertex, {}):
                predictions.insert_or_merge(
                    self._realization(vertex, text, hyperparameters.link_realization_score)
                )
            predictions.insert_or_merge(self._realization(vertex, "", 0.0))
            return predictions

        if vertex.name:
            return self._realize_named_entity(vertex)

        if vertex.is_deleted:
            predictions.insert_or_merge(self._realization(vertex, "", 0.0))
            return predictions

        if not vertex.is_translatable:
            for text in self.models.default_realizer.realize(vertex, {}):
                predictions.insert_or_merge(self._realization(vertex, text, 0.0))
            return predictions

        if not vertex.is_propbank_entry:
            predictions.add_all(self._realize_given_pos(vertex))
            return predictions

        if "pos" not in vertex.predictions:
            raise GraphStructureError(f"{vertex} is a PropBank frameset without POS predictions")

        original_pos = vertex.pos
        pos_weight = hyperparameters.syntactic_annotation_weights["pos"]
        for pos, probability in vertex.predictions["pos"]:
            vertex.pos = pos
            for prediction in self._realize_given_pos(vertex):
                predictions.insert_or_merge(
                    prediction.with_scores(prediction.score + pos_weight * log_prob(probability))
                )
        if not len(predictions):
            for pos in POS_CATEGORIES:
                vertex.pos = pos
                predictions.add_all(self._realize_given_pos(vertex))
        if not len(predictions):
            score = hyperparameters.realization_weight * math.log(
                hyperparameters.default_realization_score * 0.25
            )
            predictions.insert_or_merge(
                self._realization(vertex, vertex.cleared_instance, score, pos=POS_ANY)
            )
        vertex.pos = original_pos
        return predictions

    def _realization(
        self, vertex: Vertex, text: str, score: float, pos: Optional[str] = None
    ) -> Prediction:
        ptf = PartialTransitionFunction()
        ptf.realization[vertex.index] = text
        if pos is not None:
            ptf.pos[vertex.index] = pos
        elif vertex.is_propbank_entry:
            ptf.pos[vertex.index] = POS_ANY
        return Prediction(text, score, partial_transition_function=ptf)

    def _realize_named_entity(self, vertex: Vertex) -> CandidateList:
        predictions = CandidateList(self.hyperparameters.max_realization_predictions)
        counts: Dict[str, int] = {}
        for key in (f"{vertex.name.lower()}\t{vertex.instance}", vertex.instance):
            if key in self.models.named_entity_counts:
                counts = self.models.named_entity_counts[key]
                break

        total = sum(counts.values())
        named = CandidateList(self.hyperparameters.max_realization_predictions)
        if total > 0:
            for direction, text in (
                ("left", f"{vertex.instance} {vertex.name}"),
                ("right", f"{vertex.name} {vertex.instance}"),
                ("delete", vertex.name),
            ):
                count = counts.get(direction, 0)
                if count > 0:
                    named.insert_or_merge(
                        self._realization(vertex, text, math.log(count / total), pos="NN")
                    )
        if len(named):
            predictions.insert_or_merge(named.best())
        else:
            predictions.insert_or_merge(
                self._realization(vertex, vertex.name.lower(), 0.0, pos="NN")
            )

        country_form = word_lists.COUNTRY_FORMS.get(vertex.name.lower())
        if country_form is not None:
            predictions.insert_or_merge(self._realization(vertex, country_form, 0.0, pos="JJ"))
        return predictions

    def _realize_given_pos(self, vertex: Vertex) -> CandidateList:
        predictions = CandidateList(self.hyperparameters.max_realization_predictions_per_pos)
        annotations = vertex.predictions
        if vertex.pos == "NN" and "number" in annotations:
            for number in annotations["number"]:
                predictions.add_all(self._realize_with_annotation(vertex, {"number": number}))
        elif vertex.pos == "VB" and "voice" in annotations:
            for voice in annotations["voice"]:
                if "tense" not in annotations:
                    predictions.add_all(self._realize_with_annotation(vertex, {"voice": voice}))
                    continue
                for tense in annotations["tense"]:
                    predictions.add_all(
                        self._realize_with_annotation(vertex, {"voice": voice, "tense": tense})
                    )
        elif vertex.pos == "VB" and "tense" in annotations:
            for tense in annotations["tense"]:
                predictions.add_all(self._realize_with_annotation(vertex, {"tense": tense}))
        else:
            predictions.add_all(self._realize_with_annotation(vertex, {}))
        return predictions

    def _realize_with_annotation(
        self, vertex: Vertex, syntactic_annotation: SyntacticAnnotation
    ) -> List[Prediction]:
        hyperparameters = self.hyperparameters
        annotation_score = sum(
            hyperparameters.syntactic_annotation_weights.get(key, 0.0) * log_prob(probability)
            for key, (_, probability) in syntactic_annotation.items()
        )
        labels = {key: label for key, (label, _) in syntactic_annotation.items()}

        scored: List[Tuple[str, float]] = []
        if self.models.realization.has_observed(vertex):
            candidates = hyperparameters.realization.select(
                self.models.realization.score_candidates(vertex, self.graph, labels)
            )
            for i, (text, probability) in enumerate(candidates):
                threshold = hyperparameters.min_translation_score
                if i == 0:
                    threshold /= 100
                if probability < threshold:
                    continue
                score = hyperparameters.realization_weight * log_prob(probability)
                for form in self._voice_forms(text, labels):
                    scored.append((form, score + annotation_score))

        default_score = hyperparameters.realization_weight * math.log(
            hyperparameters.default_realization_score
        )
        for text in self.models.default_realizer.realize(vertex, syntactic_annotation):
            scored.append((text, default_score))

        predictions = []
        for text, score in scored:
            ptf = PartialTransitionFunction()
            if vertex.pos is not None:
                ptf.pos[vertex.index] = vertex.pos
            ptf.realization[vertex.index] = text
            for key in ("number", "voice", "tense"):
                if key in labels:
                    getattr(ptf, key)[vertex.index] = labels[key]
            predictions.append(Prediction(text, score, partial_transition_function=ptf))
        return predictions

    @staticmethod
    def _voice_forms(text: str, labels: Dict[str, str]) -> List[str]:
        """
        Passive realizations get their form of "be".
        """
        if labels.get("voice") != PASSIVE:
            return [text]
        tense = labels.get("tense")
        if tense == PRESENT:
            return [f"is {text}", f"are {text}"]
        if tense == FUTURE:
            return [f"be {text}"]
        return [f"was {text}", f"were {text}"]
