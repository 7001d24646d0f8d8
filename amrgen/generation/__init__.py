from amrgen.generation.candidate_list import CandidateList
from amrgen.generation.first_stage import StructuralTransitionProcessor
from amrgen.generation.generator import Generator, generate
from amrgen.generation.hyperparameters import Hyperparameters, NBest
from amrgen.generation.partial_transition_function import PartialTransitionFunction
from amrgen.generation.prediction import Prediction
from amrgen.generation.reordering import ReorderingScorer
from amrgen.generation.second_stage import RealizationSearchProcessor
from amrgen.generation.syntactic_annotator import SyntacticAnnotator
