import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Tuple

from amrgen.common.checks import check_positive
from amrgen.common.from_params import FromParams
from amrgen.common.tqdm import Tqdm
from amrgen.generation.first_stage import StructuralTransitionProcessor
from amrgen.generation.hyperparameters import Hyperparameters
from amrgen.generation.partial_transition_function import PartialTransitionFunction
from amrgen.generation.second_stage import RealizationSearchProcessor
from amrgen.generation.syntactic_annotator import SyntacticAnnotator
from amrgen.graph.amr_graph import AmrGraph
from amrgen.oracles.generation_models import GenerationModels

logger = logging.getLogger(__name__)


def generate(
    graph: AmrGraph,
    hyperparameters: Hyperparameters,
    models: GenerationModels,
    run_first_stage: bool = True,
) -> Tuple[str, PartialTransitionFunction]:
    """
    Generates a sentence for `graph`, which is modified in the process.

    Returns the sentence together with the partial transition function of the winning
    hypothesis, or `("", PartialTransitionFunction())` if no hypothesis survived.
    """
    graph.prepare(models.pos_lexicon, models.deverbalizations)
    if run_first_stage:
        StructuralTransitionProcessor(models.structural, models.merge_table).process(graph)
    SyntacticAnnotator(models.syntactic_annotation, hyperparameters).annotate(graph)

    prediction = RealizationSearchProcessor(models, hyperparameters).generate(graph)
    if prediction is None:
        logger.warning("no hypothesis survived the realization search")
        return "", PartialTransitionFunction()

    partial_transition_function = prediction.partial_transition_function
    sentence = graph.yield_string(partial_transition_function)
    logger.debug(f"generated {sentence!r} with score {prediction.score:.4f}")
    return sentence, partial_transition_function


class Generator(FromParams):
    """
    Generates sentences for batches of graphs with one set of hyperparameters and models.
    Typically built from a configuration file:

    ```python
    generator = Generator.from_params(Params.from_file("generator.jsonnet"))
    sentences = generator.generate_all(graphs)
    ```

    # Parameters

    hyperparameters : `Hyperparameters`, optional
    models : `GenerationModels`, optional
    run_first_stage : `bool`, optional (default = `True`)
        Whether to apply the structural transitions before the realization search.
    """

    def __init__(
        self,
        hyperparameters: Hyperparameters = None,
        models: GenerationModels = None,
        run_first_stage: bool = True,
    ) -> None:
        self.hyperparameters = hyperparameters or Hyperparameters()
        self.models = models or GenerationModels()
        self.run_first_stage = run_first_stage

    def generate(self, graph: AmrGraph) -> Tuple[str, PartialTransitionFunction]:
        return generate(graph, self.hyperparameters, self.models, self.run_first_stage)

    def generate_all(self, graphs: List[AmrGraph], num_workers: int = 1) -> List[str]:
        """
        Generates a sentence for each graph, in the order of `graphs`.  With more than one
        worker, graphs are processed by a thread pool; the oracles must then be safe to
        share between threads, as the built-in ones are.
        """
        check_positive(num_workers, "num_workers")
        logger.info(f"generating {len(graphs)} sentences with {num_workers} worker(s)")
        if num_workers == 1:
            return [self.generate(graph)[0] for graph in Tqdm.tqdm(graphs)]

        with ThreadPoolExecutor(max_workers=num_workers) as executor:
            results = executor.map(self.generate, graphs)
            return [sentence for sentence, _ in Tqdm.tqdm(results, total=len(graphs))]
