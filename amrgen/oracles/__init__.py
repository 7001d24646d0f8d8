from amrgen.oracles.child_insertion_oracle import ChildInsertionOracle, LookupChildInsertionOracle
from amrgen.oracles.default_realizer import DefaultRealizer, RuleBasedRealizer
from amrgen.oracles.denominator_oracle import DenominatorOracle, LookupDenominatorOracle
from amrgen.oracles.generation_models import GenerationModels
from amrgen.oracles.insertion_oracle import InsertionOracle, LookupInsertionOracle
from amrgen.oracles.language_model import LanguageModelOracle, LookupLanguageModel
from amrgen.oracles.nltk_language_model import NltkLanguageModel
from amrgen.oracles.realization_oracle import LookupRealizationOracle, RealizationOracle
from amrgen.oracles.reorder_oracle import LookupReorderOracle, ReorderOracle
from amrgen.oracles.structural_oracle import LookupStructuralOracle, StructuralOracle
from amrgen.oracles.syntactic_annotation_oracle import (
    LookupSyntacticAnnotationOracle,
    SyntacticAnnotationOracle,
)
