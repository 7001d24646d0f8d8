import logging
import re
from typing import Dict, List, Tuple

from overrides import overrides

from amrgen.common.registrable import Registrable
from amrgen.graph import word_lists
from amrgen.graph.pos import POS_ANY, simplify_pos
from amrgen.graph.vertex import Vertex
from amrgen.oracles.transitions import FUTURE, NO_TENSE, PAST, PRESENT, SINGULAR

logger = logging.getLogger(__name__)

# A syntactic annotation maps a key like "tense" to the chosen value and its probability.
SyntacticAnnotation = Dict[str, Tuple[str, float]]


class DefaultRealizer(Registrable):
    """
    Produces fallback realizations for concepts, used next to (or instead of) the
    realizations of the `RealizationOracle`.
    """

    default_implementation = "rule-based"

    def realize(self, vertex: Vertex, syntactic_annotation: SyntacticAnnotation) -> List[str]:
        raise NotImplementedError


_FIXED_REALIZATIONS: Dict[str, List[str]] = {
    "possible": ["can"],
    "obligate-01": ["must"],
    "+": ["please"],
    "-": ["no", "not"],
    "cause-01": ["due to", "because", "for"],
    "contrast-01": ["but"],
    "resemble-01": ["like"],
}

_EMPTY_REALIZATIONS = frozenset(
    ["person", "thing", "amr-unknown", "have-org-role", "contrast", "distance-quantity"]
)

_IRREGULAR_PAST: Dict[str, str] = {
    "be": "was",
    "become": "became",
    "begin": "began",
    "break": "broke",
    "bring": "brought",
    "build": "built",
    "buy": "bought",
    "choose": "chose",
    "come": "came",
    "cut": "cut",
    "do": "did",
    "draw": "drew",
    "drive": "drove",
    "eat": "ate",
    "fall": "fell",
    "feel": "felt",
    "find": "found",
    "fly": "flew",
    "forget": "forgot",
    "get": "got",
    "give": "gave",
    "go": "went",
    "grow": "grew",
    "have": "had",
    "hear": "heard",
    "hold": "held",
    "keep": "kept",
    "know": "knew",
    "lead": "led",
    "leave": "left",
    "let": "let",
    "lose": "lost",
    "make": "made",
    "mean": "meant",
    "meet": "met",
    "pay": "paid",
    "put": "put",
    "read": "read",
    "run": "ran",
    "say": "said",
    "see": "saw",
    "sell": "sold",
    "send": "sent",
    "set": "set",
    "sit": "sat",
    "sleep": "slept",
    "speak": "spoke",
    "spend": "spent",
    "stand": "stood",
    "take": "took",
    "teach": "taught",
    "tell": "told",
    "think": "thought",
    "understand": "understood",
    "win": "won",
    "write": "wrote",
}

_IRREGULAR_PARTICIPLES: Dict[str, str] = {
    "be": "been",
    "begin": "begun",
    "break": "broken",
    "choose": "chosen",
    "do": "done",
    "draw": "drawn",
    "drive": "driven",
    "eat": "eaten",
    "fall": "fallen",
    "fly": "flown",
    "forget": "forgotten",
    "give": "given",
    "go": "gone",
    "grow": "grown",
    "know": "known",
    "see": "seen",
    "speak": "spoken",
    "take": "taken",
    "write": "written",
}

_IRREGULAR_PLURALS: Dict[str, str] = {
    "child": "children",
    "foot": "feet",
    "man": "men",
    "mouse": "mice",
    "person": "people",
    "tooth": "teeth",
    "woman": "women",
}

_NUMBER = re.compile(r"[0-9]+(\.[0-9]+)?")
_SIBILANT_ENDING = re.compile(r"(s|x|z|ch|sh)$")
_CONSONANT_Y_ENDING = re.compile(r"[^aeiou]y$")


def third_person(verb: str) -> str:
    if verb == "be":
        return "is"
    if verb == "have":
        return "has"
    if verb in ("do", "go"):
        return verb + "es"
    if _SIBILANT_ENDING.search(verb):
        return verb + "es"
    if _CONSONANT_Y_ENDING.search(verb):
        return verb[:-1] + "ies"
    return verb + "s"


def past_tense(verb: str) -> str:
    if verb in _IRREGULAR_PAST:
        return _IRREGULAR_PAST[verb]
    if verb.endswith("e"):
        return verb + "d"
    if _CONSONANT_Y_ENDING.search(verb):
        return verb[:-1] + "ied"
    return verb + "ed"


def past_participle(verb: str) -> str:
    if verb in _IRREGULAR_PARTICIPLES:
        return _IRREGULAR_PARTICIPLES[verb]
    return past_tense(verb)


def gerund(verb: str) -> str:
    if verb == "be":
        return "being"
    if verb.endswith("ie"):
        return verb[:-2] + "ying"
    if verb.endswith("e") and not verb.endswith("ee") and len(verb) > 2:
        return verb[:-1] + "ing"
    return verb + "ing"


def plural(noun: str) -> str:
    if noun in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[noun]
    if _SIBILANT_ENDING.search(noun):
        return noun + "es"
    if _CONSONANT_Y_ENDING.search(noun):
        return noun[:-1] + "ies"
    return noun + "s"


def adverb(adjective: str) -> str:
    if adjective.endswith("ic"):
        return adjective + "ally"
    if adjective.endswith("le"):
        return adjective[:-1] + "y"
    if _CONSONANT_Y_ENDING.search(adjective):
        return adjective[:-1] + "ily"
    return adjective + "ly"


@DefaultRealizer.register("rule-based")
class RuleBasedRealizer(DefaultRealizer):
    """
    Handwritten realizations: a few closed-class concepts and function words, pronouns,
    dates and numbers, and simple English inflection of PropBank framesets by their part
    of speech and syntactic annotation.
    """

    @overrides
    def realize(self, vertex: Vertex, syntactic_annotation: SyntacticAnnotation) -> List[str]:
        instance = vertex.instance
        if instance == "do":
            return ["do", "did"]
        if instance == "be":
            return ["be"] if vertex.mode == "imperative" else ["is", "are", "was", "were", "be"]
        if instance == "have":
            return ["have", "has", "had"]
        if instance in _FIXED_REALIZATIONS:
            return list(_FIXED_REALIZATIONS[instance])

        cleared = vertex.cleared_instance
        if cleared in _EMPTY_REALIZATIONS:
            return [""]
        if cleared in _FIXED_REALIZATIONS:
            return list(_FIXED_REALIZATIONS[cleared])

        incoming_label = vertex.incoming_label
        if cleared in word_lists.PRONOUNS:
            return self._realize_pronoun(vertex, cleared, incoming_label)

        if vertex.is_link:
            if incoming_label == ":poss":
                number = vertex.annotation.original.predictions.get("number")
                if number and number[0][0] == SINGULAR:
                    return ["his", "its", "her"]
                return ["their"]
            return []

        if cleared in word_lists.NO_ALIGNMENT_CONCEPTS:
            return [""]

        cleared = cleared.replace('"', "").replace("-", " ")

        if vertex.is_propbank_entry:
            return self._inflect(vertex, cleared, syntactic_annotation)

        if incoming_label == ":month" and cleared.isdigit() and int(cleared) in word_lists.MONTHS:
            return [word_lists.MONTHS[int(cleared)]]
        if _NUMBER.fullmatch(cleared):
            value = float(cleared)
            if value >= 1e9:
                return [f"{value / 1e9:g} billion"]
            if value >= 1e6:
                return [f"{value / 1e6:g} million"]
        parent = vertex.parent
        if (
            incoming_label == ":value"
            and parent is not None
            and parent.instance == "ordinal-entity"
            and cleared.isdigit()
            and int(cleared) in word_lists.ORDINALS
        ):
            return [word_lists.ORDINALS[int(cleared)]]
        if cleared == "1":
            return ["one", "1"]
        if cleared == "2":
            return ["two", "2"]
        return [cleared]

    def _realize_pronoun(self, vertex: Vertex, pronoun: str, incoming_label: str) -> List[str]:
        parent = vertex.parent
        if pronoun in ("you", "we") and parent is not None and parent.mode == "imperative":
            return [""]
        if incoming_label == ":poss":
            return [word_lists.POSSESSIVE_PRONOUNS[pronoun]]
        realizations = [word_lists.POSSESSIVE_PRONOUNS[pronoun]]
        if pronoun in word_lists.PERSONAL_PRONOUNS:
            realizations.append(word_lists.PERSONAL_PRONOUNS[pronoun])
        realizations.append(pronoun)
        return realizations

    def _inflect(
        self, vertex: Vertex, lemma: str, syntactic_annotation: SyntacticAnnotation
    ) -> List[str]:
        pos = simplify_pos(vertex.pos, True) if vertex.pos is not None else POS_ANY
        if pos == "VBG":
            return [gerund(lemma)]
        if pos == "VBN":
            return [past_participle(lemma)]
        if pos == "NN":
            number = syntactic_annotation.get("number")
            if number is not None and number[0] != SINGULAR:
                return [plural(lemma)]
            return [lemma]
        if pos == "JJ":
            return [lemma, adverb(lemma)]
        if pos == "VB":
            if vertex.mode:
                return [lemma]
            tense = syntactic_annotation.get("tense", (NO_TENSE, 1.0))[0]
            if tense in (NO_TENSE, FUTURE):
                return [lemma]
            if tense == PAST:
                return [past_tense(lemma)]
            if tense == PRESENT:
                if self._guess_third_person(vertex):
                    return [third_person(lemma), lemma]
                return [lemma]
            return [lemma]
        return []

    def _guess_third_person(self, vertex: Vertex) -> bool:
        for edge in vertex.child_edges():
            if edge.label not in (":ARG0", ":ARG1"):
                continue
            child = edge.target
            if child.instance in ("he", "she", "it"):
                return True
            number = child.predictions.get("number")
            if number and number[0][0] == SINGULAR:
                return True
        return False
