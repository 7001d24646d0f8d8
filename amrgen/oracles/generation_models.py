import logging
from typing import Dict, List, Optional, Tuple

from amrgen.common.checks import ConfigurationError
from amrgen.common.from_params import FromParams
from amrgen.oracles.child_insertion_oracle import ChildInsertionOracle, LookupChildInsertionOracle
from amrgen.oracles.default_realizer import DefaultRealizer, RuleBasedRealizer
from amrgen.oracles.denominator_oracle import DenominatorOracle, LookupDenominatorOracle
from amrgen.oracles.insertion_oracle import InsertionOracle, LookupInsertionOracle
from amrgen.oracles.language_model import LanguageModelOracle, LookupLanguageModel
from amrgen.oracles.realization_oracle import LookupRealizationOracle, RealizationOracle
from amrgen.oracles.reorder_oracle import LookupReorderOracle, ReorderOracle
from amrgen.oracles.structural_oracle import LookupStructuralOracle, StructuralOracle
from amrgen.oracles.syntactic_annotation_oracle import (
    LookupSyntacticAnnotationOracle,
    SyntacticAnnotationOracle,
)

logger = logging.getLogger(__name__)


class GenerationModels(FromParams):
    """
    Everything the generator consults besides its hyperparameters: one oracle per decision,
    the language model, and the lexical tables used by graph preparation and the first
    stage.  Oracles that are not configured default to empty lookup tables, so a
    configuration only lists what it knows about.

    # Parameters

    structural, syntactic_annotation, realization, reorder : oracles, optional
    argument_insertion : `InsertionOracle`, optional
        Insertions in front of `:ARG0` to `:ARG9` children.
    other_insertion : `InsertionOracle`, optional
        Insertions in front of all other children.
    child_insertion, denominator, language_model, default_realizer : optional
    merge_table : `Dict[str, List[str]]`, optional
        Maps `"<parent concept>\\t<child concept>"` to the `[concept, pos]` the two merge
        into, e.g. `{"person\\tdevelop-02": ["developer", "NN"]}`.
    named_entity_counts : `Dict[str, Dict[str, int]]`, optional
        Maps `"<name>\\t<concept>"` or `"<concept>"` to how often the concept was realized
        left of the name, right of it, or deleted (`left`, `right`, `delete`).
    pos_lexicon : `Dict[str, str]`, optional
        Treebank tags of concepts that are not PropBank framesets.
    deverbalizations : `Dict[str, str]`, optional
        Maps `"<concept>\\t<label>\\t<child concept>"` to a single concept replacing both,
        e.g. `{"person\\t:ARG0-of\\tteach-01": "teacher"}`.
    """

    def __init__(
        self,
        structural: StructuralOracle = None,
        syntactic_annotation: SyntacticAnnotationOracle = None,
        realization: RealizationOracle = None,
        reorder: ReorderOracle = None,
        argument_insertion: InsertionOracle = None,
        other_insertion: InsertionOracle = None,
        child_insertion: ChildInsertionOracle = None,
        denominator: DenominatorOracle = None,
        language_model: LanguageModelOracle = None,
        default_realizer: DefaultRealizer = None,
        merge_table: Dict[str, List[str]] = None,
        named_entity_counts: Dict[str, Dict[str, int]] = None,
        pos_lexicon: Dict[str, str] = None,
        deverbalizations: Dict[str, str] = None,
    ) -> None:
        self.structural = structural or LookupStructuralOracle()
        self.syntactic_annotation = syntactic_annotation or LookupSyntacticAnnotationOracle()
        self.realization = realization or LookupRealizationOracle()
        self.reorder = reorder or LookupReorderOracle()
        self.argument_insertion = argument_insertion or LookupInsertionOracle()
        self.other_insertion = other_insertion or LookupInsertionOracle()
        self.child_insertion = child_insertion or LookupChildInsertionOracle()
        self.denominator = denominator or LookupDenominatorOracle()
        self.language_model = language_model or LookupLanguageModel()
        self.default_realizer = default_realizer or RuleBasedRealizer()

        self.merge_table: Dict[Tuple[str, str], Tuple[str, Optional[str]]] = {}
        for key, merged in (merge_table or {}).items():
            parts = key.split("\t")
            if len(parts) != 2 or len(merged) not in (1, 2):
                raise ConfigurationError(f"invalid merge table entry {key!r}: {merged}")
            pos = merged[1] if len(merged) == 2 else None
            self.merge_table[(parts[0], parts[1])] = (merged[0], pos)

        self.named_entity_counts = named_entity_counts or {}
        self.pos_lexicon = pos_lexicon or {}
        self.deverbalizations = deverbalizations or {}
