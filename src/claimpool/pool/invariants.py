"""
Ledger Invariants — проверка инвариантов после каждой закоммиченной операции

Локальные инварианты (проверяемые одной записью):
- withdrawn_le_deposited : total_withdrawn <= total_deposited
- returned_le_diverted   : total_returned <= total_diverted
- pool_value_computable  : deposited - withdrawn - diverted + returned
                           вычисляется без underflow/overflow

Инварианты набора позиций:
- supply_matches_positions : sum(claim_amount) == total_claim_supply

Quadrant'ы ORPHANED_VALUE / VALUELESS_SUPPLY нарушением НЕ являются: они
достижимы легитимными последовательностями (диверсия всего value, возврат
после выхода всех держателей). Запрещён только вход в них через депозит.
"""

from typing import Iterable

from claimpool.core.domain import PoolLedger, Position
from claimpool.core.errors import LedgerMathError
from claimpool.core.math.ledger_math import PRODUCTION_MATH, LedgerMath


def check_ledger_invariants(ledger: PoolLedger, ledger_math: LedgerMath = PRODUCTION_MATH) -> list[str]:
    """
    Проверка инвариантов записи ledger'а.

    Returns:
        Список id нарушенных инвариантов (пустой — всё в порядке)
    """
    violations: list[str] = []

    if ledger.total_withdrawn > ledger.total_deposited:
        violations.append("withdrawn_le_deposited")
    if ledger.total_returned > ledger.total_diverted:
        violations.append("returned_le_diverted")

    try:
        ledger.current_value(ledger_math)
    except LedgerMathError:
        violations.append("pool_value_computable")

    return violations


def check_position_invariants(ledger: PoolLedger, positions: Iterable[Position]) -> list[str]:
    """Проверка согласованности позиций с total_claim_supply."""
    total_claims = sum(position.claim_amount for position in positions)
    if total_claims != ledger.total_claim_supply:
        return ["supply_matches_positions"]
    return []
