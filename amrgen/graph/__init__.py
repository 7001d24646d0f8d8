from amrgen.graph.amr_graph import AmrGraph
from amrgen.graph.edge import Edge
from amrgen.graph.pos import POS_ANY, POS_CATEGORIES, simplify_pos
from amrgen.graph.vertex import EMPTY_VERTEX, Annotation, Vertex
