"""
Relationship graph: typed, bidirectional links between owned constructs.
"""

from .builder import GraphBuilder, build_graph, normalize_path
from .categories import EDGE_SPECS, INHERITABLE_KINDS, EdgeCategory, EdgeSpec
from .config import GRAPH_CONFIG
from .graph import Edge, RelationshipGraph, overview_edges
from .schemas import ConstructRef, EndpointRef, RelationshipRecord

__all__ = [
    "GraphBuilder",
    "build_graph",
    "normalize_path",
    "EDGE_SPECS",
    "INHERITABLE_KINDS",
    "EdgeCategory",
    "EdgeSpec",
    "GRAPH_CONFIG",
    "Edge",
    "RelationshipGraph",
    "overview_edges",
    "ConstructRef",
    "EndpointRef",
    "RelationshipRecord",
]
