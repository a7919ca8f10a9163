"""GATE 0: Deposit Quadrant

Первый gate депозита. Блокирует вход, если пул находится в запрещённом
quadrant'е:
- ORPHANED_VALUE   (supply == 0, value > 0): защита остаточного value от
  присвоения первым новым депозитором
- VALUELESS_SUPPLY (supply > 0, value == 0): защита claim существующих
  держателей на будущие возвраты из резерва от размытия

Gate не бросает исключений при блокировке, а возвращает решение; калькулятор
выпуска (calc_claims_for_deposit) повторяет ту же проверку и бросает
ForbiddenState, если его вызвали в обход gate.
"""

from dataclasses import dataclass

from claimpool.core.math.quadrant import PoolQuadrant, classify_quadrant


@dataclass(frozen=True)
class Gate00Result:
    """Результат GATE 0."""

    entry_allowed: bool
    block_reason: str

    # Входные параметры для диагностики
    supply: int
    value: int
    quadrant: PoolQuadrant

    details: str


class Gate00DepositQuadrant:
    """GATE 0: допуск депозита по quadrant'у (supply, value)."""

    def evaluate(self, supply: int, value: int) -> Gate00Result:
        """Оценка GATE 0.

        Args:
            supply: total_claim_supply
            value: текущее value пула

        Returns:
            Gate00Result с решением о допуске
        """
        quadrant = classify_quadrant(supply, value)

        if quadrant == PoolQuadrant.ORPHANED_VALUE:
            return Gate00Result(
                entry_allowed=False,
                block_reason="orphaned_value",
                supply=supply,
                value=value,
                quadrant=quadrant,
                details=f"Orphaned value {value} with zero claim supply: deposits blocked",
            )

        if quadrant == PoolQuadrant.VALUELESS_SUPPLY:
            return Gate00Result(
                entry_allowed=False,
                block_reason="valueless_supply",
                supply=supply,
                value=value,
                quadrant=quadrant,
                details=f"Claim supply {supply} with zero pool value: deposits blocked",
            )

        return Gate00Result(
            entry_allowed=True,
            block_reason="",
            supply=supply,
            value=value,
            quadrant=quadrant,
            details=f"PASS: quadrant={quadrant.value}",
        )
