"""
Public API for include resolution.
"""

from typing import Optional

from mfdcore.settings import Settings
from .include_resolver import IncludeResolver
from .schemas import ResolveResult


def _resolver(parser, project_root, settings: Optional[Settings]) -> IncludeResolver:
    if settings is None:
        return IncludeResolver(parser, project_root=project_root)
    return IncludeResolver(
        parser,
        project_root=project_root,
        max_depth=settings.get("resolver.max_include_depth"),
        extension=settings.get("resolver.extension"),
    )


def resolve_file(
    root_path,
    parser,
    project_root: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ResolveResult:
    """
    Resolve a multi-file MFD model starting from a root file.

    Processes all include directives, detects circular includes, and produces
    a unified document. Never raises for include problems; they are returned
    in ResolveResult.errors.

    Args:
        root_path: Path of the root .mfd file
        parser: Object with parse(source, path) -> Document
        project_root: Directory includes must stay inside (default: root file's directory)
        settings: Optional layered settings overriding depth/extension

    Returns:
        ResolveResult with the merged document, loaded files and diagnostics
    """
    return _resolver(parser, project_root, settings).resolve_file(root_path)


def resolve_source(
    source: str,
    source_path,
    parser,
    project_root: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ResolveResult:
    """Resolve includes for in-memory source text that lives at source_path."""
    return _resolver(parser, project_root, settings).resolve_source(source, source_path)
