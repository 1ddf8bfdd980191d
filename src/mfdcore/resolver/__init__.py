"""
Include resolution: merges a multi-file model into one document.
"""

from .facade import resolve_file, resolve_source
from .include_resolver import IncludeResolver
from .schemas import ErrorLocation, ResolveError, ResolveErrorType, ResolveResult
from .config import RESOLVER_CONFIG

__all__ = [
    "resolve_file",
    "resolve_source",
    "IncludeResolver",
    "ErrorLocation",
    "ResolveError",
    "ResolveErrorType",
    "ResolveResult",
    "RESOLVER_CONFIG",
]
