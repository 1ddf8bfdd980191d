"""
Model package: construct keys, type-reference helpers and the collector.
"""

from .keys import (
    ConstructKind,
    ConstructKey,
    OWNABLE_KINDS,
    api_key,
    api_key_name,
    construct_key,
    iter_construct_keys,
    key,
    kind_of,
)
from .types import PRIMITIVE_TYPES, extract_type_refs
from .collector import CollectedModel, collect_model, known_types, known_names

__all__ = [
    "ConstructKind",
    "ConstructKey",
    "OWNABLE_KINDS",
    "api_key",
    "api_key_name",
    "construct_key",
    "iter_construct_keys",
    "key",
    "kind_of",
    "PRIMITIVE_TYPES",
    "extract_type_refs",
    "CollectedModel",
    "collect_model",
    "known_types",
    "known_names",
]
