"""
End-to-end analysis: resolve includes, collect, assign owners, build the graph.
"""

from dataclasses import dataclass
from typing import Optional

from mfdcore.logging_config import logger
from mfdcore.model import CollectedModel, collect_model
from mfdcore.ownership import OwnershipMap, assign_owners
from mfdcore.relationships import RelationshipGraph, build_graph
from mfdcore.resolver import ResolveResult, resolve_file, resolve_source
from mfdcore.settings import Settings


@dataclass
class AnalysisResult:
    """Output of every stage for one root file."""
    resolution: ResolveResult
    model: CollectedModel
    owners: OwnershipMap
    graph: RelationshipGraph

    @property
    def ok(self) -> bool:
        return self.resolution.ok


def _analyze(resolution: ResolveResult) -> AnalysisResult:
    model = collect_model(resolution.document)
    owners = assign_owners(model)
    graph = build_graph(model, owners)
    return AnalysisResult(resolution=resolution, model=model, owners=owners, graph=graph)


def analyze_file(
    root_path,
    parser,
    project_root: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> AnalysisResult:
    """
    Run every stage on a multi-file model.

    Include diagnostics do not stop the later stages; they run on whatever
    the resolver could merge.

    Args:
        root_path: Root .mfd file
        parser: Object with parse(source, path) -> Document
        project_root: Directory includes must stay inside
        settings: Optional layered settings

    Returns:
        AnalysisResult
    """
    resolution = resolve_file(root_path, parser, project_root=project_root, settings=settings)
    result = _analyze(resolution)
    logger.info(
        f"Analyzed {root_path}: {len(resolution.files)} file(s), "
        f"{len(result.owners)} owned construct(s), {len(resolution.errors)} diagnostic(s)"
    )
    return result


def analyze_source(
    source: str,
    source_path,
    parser,
    project_root: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> AnalysisResult:
    """Like analyze_file() for in-memory source located at source_path."""
    return _analyze(resolve_source(source, source_path, parser, project_root=project_root, settings=settings))
