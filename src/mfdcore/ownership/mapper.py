"""
Ownership mapper: decides which component owns every construct.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Tuple

from mfdcore.logging_config import logger
from mfdcore.model import CollectedModel, ConstructKey, iter_construct_keys
from .passes import PASSES, OwnershipContext, OwnershipPass


@dataclass(frozen=True)
class Assignment:
    """Owner of one construct and the pass that decided it."""
    component: str
    pass_: OwnershipPass


@dataclass(frozen=True)
class PassSnapshot:
    """Keys assigned by a single pass (read-only)."""
    pass_: OwnershipPass
    assignments: Mapping

    def __len__(self) -> int:
        return len(self.assignments)


class OwnershipMap(Mapping):
    """
    Read-only map from construct key to owning component name.

    Keys that no pass could assign are absent; owner() returns None for
    them. With at least one component the fallback pass makes the map total.
    """

    def __init__(
        self,
        assignments: Dict[ConstructKey, Assignment],
        snapshots: Tuple[PassSnapshot, ...],
        universe: Tuple[ConstructKey, ...],
        components: Tuple[str, ...],
    ):
        self._assignments = MappingProxyType(dict(assignments))
        self.snapshots = snapshots
        self.universe = universe
        self.components = components

    def __getitem__(self, construct: ConstructKey) -> str:
        return self._assignments[construct].component

    def __iter__(self) -> Iterator[ConstructKey]:
        return iter(self._assignments)

    def __len__(self) -> int:
        return len(self._assignments)

    @property
    def has_components(self) -> bool:
        return bool(self.components)

    def owner(self, construct: ConstructKey) -> Optional[str]:
        assignment = self._assignments.get(construct)
        return assignment.component if assignment else None

    def assignment(self, construct: ConstructKey) -> Optional[Assignment]:
        return self._assignments.get(construct)

    def is_fallback(self, construct: ConstructKey) -> bool:
        """True when the owner is only the first-component default."""
        assignment = self._assignments.get(construct)
        return assignment is not None and assignment.pass_ is OwnershipPass.FALLBACK

    def unassigned(self) -> List[ConstructKey]:
        return [k for k in self.universe if k not in self._assignments]

    def snapshot(self, pass_: OwnershipPass) -> PassSnapshot:
        for snap in self.snapshots:
            if snap.pass_ is pass_:
                return snap
        raise KeyError(pass_)

    def by_component(self) -> Dict[str, List[ConstructKey]]:
        """Construct keys grouped by owner, components in declaration order."""
        grouped: Dict[str, List[ConstructKey]] = {name: [] for name in self.components}
        for construct, assignment in self._assignments.items():
            grouped.setdefault(assignment.component, []).append(construct)
        return grouped


def assign_owners(model: CollectedModel) -> OwnershipMap:
    """
    Assign every construct of the model to a component.

    Runs the seven passes in order. Each pass sees only the assignments of
    the passes before it, and only its proposals for still-unassigned keys
    are kept.

    Args:
        model: Collected model

    Returns:
        OwnershipMap with per-pass snapshots
    """
    ctx = OwnershipContext(model)
    current: Dict[ConstructKey, str] = {}
    decided: Dict[ConstructKey, Assignment] = {}
    snapshots: List[PassSnapshot] = []

    for pass_, run in PASSES:
        proposed = run(ctx, MappingProxyType(current))
        accepted = {k: comp for k, comp in proposed.items() if k not in current}
        current.update(accepted)
        for k, comp in accepted.items():
            decided[k] = Assignment(comp, pass_)
        snapshots.append(PassSnapshot(pass_, MappingProxyType(accepted)))
        logger.debug(f"Ownership pass {pass_.value}: {len(accepted)} assigned")

    universe = tuple(iter_construct_keys(model))
    owners = OwnershipMap(decided, tuple(snapshots), universe, tuple(ctx.component_names))

    missing = owners.unassigned()
    if missing:
        logger.warning(f"{len(missing)} construct(s) have no owner (model declares no components)")
    logger.info(f"Assigned owners for {len(owners)} of {len(universe)} construct(s)")
    return owners
