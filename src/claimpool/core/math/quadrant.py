"""
Pool Quadrant — классификация состояния пула по (supply, value)

| Quadrant          | Условие                  | Депозит                 |
|-------------------|--------------------------|-------------------------|
| EMPTY             | supply == 0, value == 0  | 1:1 (bootstrap пула)    |
| ORPHANED_VALUE    | supply == 0, value > 0   | запрещён                |
| VALUELESS_SUPPLY  | supply > 0, value == 0   | запрещён                |
| ACTIVE            | supply > 0, value > 0    | pro-rata, floor         |
"""

from enum import Enum


class PoolQuadrant(str, Enum):
    """Quadrant пула."""

    EMPTY = "EMPTY"
    ORPHANED_VALUE = "ORPHANED_VALUE"
    VALUELESS_SUPPLY = "VALUELESS_SUPPLY"
    ACTIVE = "ACTIVE"

    @property
    def accepts_deposits(self) -> bool:
        return self in (PoolQuadrant.EMPTY, PoolQuadrant.ACTIVE)


def classify_quadrant(supply: int, value: int) -> PoolQuadrant:
    """Определение quadrant'а по supply и value."""
    if supply == 0:
        return PoolQuadrant.EMPTY if value == 0 else PoolQuadrant.ORPHANED_VALUE
    if value == 0:
        return PoolQuadrant.VALUELESS_SUPPLY
    return PoolQuadrant.ACTIVE
