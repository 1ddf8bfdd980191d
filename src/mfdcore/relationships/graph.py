"""
Read-only relationship graph.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Iterator, List, NamedTuple, Optional

from mfdcore.model import ConstructKey
from .categories import EDGE_SPECS, EdgeCategory
from .schemas import ConstructRef, RelationshipRecord


class Edge(NamedTuple):
    source: ConstructRef
    category: EdgeCategory
    target: ConstructRef


def _values(record: RelationshipRecord, field: str) -> List[ConstructRef]:
    value = getattr(record, field)
    if value is None:
        return []
    if isinstance(value, ConstructRef):
        return [value]
    return list(value)


class RelationshipGraph(Mapping):
    """
    Map from construct key to its RelationshipRecord.

    Records are frozen; the graph exposes no way to add or change them.
    """

    def __init__(self, records: Dict[ConstructKey, RelationshipRecord], refs: Dict[ConstructKey, ConstructRef]):
        self._records = MappingProxyType(dict(records))
        self._refs = MappingProxyType(dict(refs))

    def __getitem__(self, construct: ConstructKey) -> RelationshipRecord:
        return self._records[construct]

    def __iter__(self) -> Iterator[ConstructKey]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def ref(self, construct: ConstructKey) -> Optional[ConstructRef]:
        return self._refs.get(construct)

    def edges(self, category: Optional[EdgeCategory] = None) -> Iterator[Edge]:
        """Every edge once, read from its forward side."""
        for construct, record in self._records.items():
            source = self._refs[construct]
            for cat, spec in EDGE_SPECS.items():
                if category is not None and cat is not category:
                    continue
                if construct.kind not in spec.sources:
                    continue
                for target in _values(record, spec.forward):
                    if target.kind in spec.targets:
                        yield Edge(source, cat, target)

    def find_asymmetries(self) -> List[Edge]:
        """
        Edges recorded on one end only.

        Checks forward entries against their target's inverse field and
        inverse entries against their source's forward field. An empty list
        means the graph is symmetric.
        """
        broken: List[Edge] = []
        for edge in self.edges():
            spec = EDGE_SPECS[edge.category]
            target_record = self._records.get(edge.target.key)
            if target_record is None or edge.source not in _values(target_record, spec.inverse):
                broken.append(edge)

        for construct, record in self._records.items():
            target = self._refs[construct]
            for cat, spec in EDGE_SPECS.items():
                if construct.kind not in spec.targets:
                    continue
                for source in _values(record, spec.inverse):
                    if source.kind not in spec.sources:
                        continue
                    source_record = self._records.get(source.key)
                    if source_record is None or target not in _values(source_record, spec.forward):
                        broken.append(Edge(source, cat, target))
        return broken

    def to_dict(self) -> Dict[str, dict]:
        """JSON-friendly dump, empty fields omitted."""
        result = {}
        for construct, record in self._records.items():
            entry = {"component": self._refs[construct].component}
            entry.update(record.model_dump(mode="json", exclude_defaults=True))
            result[str(construct)] = entry
        return result


def overview_edges(graph: RelationshipGraph) -> List[Edge]:
    """Edges shown in simplified architecture overviews."""
    return [edge for edge in graph.edges() if EDGE_SPECS[edge.category].overview]
