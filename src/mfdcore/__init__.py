"""
mfdcore - MFD model analysis core

Include resolution, model collection, component ownership inference and
relationship graph construction for multi-file MFD models.
"""

__version__ = "0.4.0"

# Core exports
from mfdcore.exceptions import MfdCoreError, ParseError, ConfigError
from mfdcore.parser import JsonAstParser, Parser
from mfdcore.resolver import resolve_file, resolve_source, ResolveError, ResolveErrorType, ResolveResult
from mfdcore.model import CollectedModel, ConstructKey, ConstructKind, collect_model
from mfdcore.ownership import OwnershipMap, assign_owners
from mfdcore.relationships import RelationshipGraph, RelationshipRecord, build_graph
from mfdcore.pipeline import AnalysisResult, analyze_file, analyze_source

__all__ = [
    "__version__",
    "MfdCoreError",
    "ParseError",
    "ConfigError",
    "JsonAstParser",
    "Parser",
    "resolve_file",
    "resolve_source",
    "ResolveError",
    "ResolveErrorType",
    "ResolveResult",
    "CollectedModel",
    "ConstructKey",
    "ConstructKind",
    "collect_model",
    "OwnershipMap",
    "assign_owners",
    "RelationshipGraph",
    "RelationshipRecord",
    "build_graph",
    "AnalysisResult",
    "analyze_file",
    "analyze_source",
]
