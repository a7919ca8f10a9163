"""
Tranche Math — senior/junior подпулы

Junior-транш имеет собственный подпул (junior_balance / junior_supply), senior —
остаток пула (total - junior). Депозиты и погашения внутри транша используют
те же формулы, что и пул целиком (LedgerMath), поэтому все свойства
(floor-округление, запрет quadrant'ов, no-truncation) наследуются.

Распределение:
- Убытки: junior поглощает первым, senior теряет только после обнуления junior
- Комиссии: взвешены по balance * multiplier (junior) и balance * 10_000 (senior),
  остаток после floor уходит senior

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. junior_loss + senior_loss == min(loss, junior + senior)
2. junior_fee + senior_fee == total_fee (если есть хоть какой-то вес)
3. Senior не теряет ничего, пока loss <= junior_balance
"""

from typing import Final

from claimpool.core.math.checked_int import U16
from claimpool.core.math.ledger_math import PRODUCTION_MATH, LedgerMath

# Знаменатель basis points; вес senior = balance * BPS_DENOMINATOR (множитель 1x)
BPS_DENOMINATOR: Final[int] = 10_000


class TrancheMath:
    """Формулы траншей поверх LedgerMath той же ширины."""

    def __init__(self, ledger_math: LedgerMath):
        self.ledger_math = ledger_math
        self.width = ledger_math.width
        self.wide = ledger_math.wide

    # =========================================================================
    # SUB-POOL ДЕПОЗИТЫ И ПОГАШЕНИЯ
    # =========================================================================

    def senior_balance(self, total_value: int, junior_balance: int) -> int:
        """senior_balance = total_value - junior_balance (checked)."""
        w = self.width
        return w.checked_sub(w.require(total_value, "total_value"), w.require(junior_balance, "junior_balance"))

    def senior_supply(self, total_supply: int, junior_supply: int) -> int:
        """senior_supply = total_supply - junior_supply (checked)."""
        w = self.width
        return w.checked_sub(w.require(total_supply, "total_supply"), w.require(junior_supply, "junior_supply"))

    def calc_junior_claims_for_deposit(self, junior_supply: int, junior_balance: int, deposit: int) -> int:
        """Claim-токены за депозит в junior-подпул (1:1 для первого, иначе pro-rata)."""
        return self.ledger_math.calc_claims_for_deposit(junior_supply, junior_balance, deposit)

    def calc_junior_collateral_for_redeem(self, junior_supply: int, junior_balance: int, burn: int) -> int:
        """
        Погашение против junior-подпула.

        Если junior_balance уменьшен убытками, junior держатели принимают удар.
        """
        return self.ledger_math.calc_collateral_for_redeem(junior_supply, junior_balance, burn)

    def calc_senior_collateral_for_redeem(self, senior_supply: int, senior_balance: int, burn: int) -> int:
        """Погашение против senior-подпула."""
        return self.ledger_math.calc_collateral_for_redeem(senior_supply, senior_balance, burn)

    # =========================================================================
    # РАСПРЕДЕЛЕНИЕ УБЫТКОВ И КОМИССИЙ
    # =========================================================================

    def distribute_loss(self, junior_balance: int, senior_balance: int, loss: int) -> tuple[int, int]:
        """
        Распределение убытка: junior первым, остаток — senior.

        Убыток ограничен суммой балансов (saturating).

        Returns:
            (junior_loss, senior_loss)

        Examples:
            >>> distribute_loss(1000, 5000, 1500)
            (1000, 500)
        """
        w = self.width
        total = w.saturating_add(w.require(junior_balance, "junior_balance"), w.require(senior_balance, "senior_balance"))
        capped_loss = min(w.require(loss, "loss"), total)

        if capped_loss <= junior_balance:
            return capped_loss, 0
        return junior_balance, w.saturating_sub(capped_loss, junior_balance)

    def distribute_fees(
        self,
        junior_balance: int,
        senior_balance: int,
        junior_fee_mult_bps: int,
        total_fee: int,
    ) -> tuple[int, int]:
        """
        Распределение комиссий между траншами.

        junior_fee = floor(total_fee * junior_weight / total_weight), где
        junior_weight = junior_balance * junior_fee_mult_bps,
        senior_weight = senior_balance * BPS_DENOMINATOR.
        Senior получает остаток.

        Args:
            junior_balance: Баланс junior-транша
            senior_balance: Баланс senior-транша
            junior_fee_mult_bps: Множитель junior в bps (20_000 = 2x), u16
            total_fee: Комиссия к распределению

        Returns:
            (junior_fee, senior_fee); нули если total_fee == 0 или нет веса

        Raises:
            LedgerOverflow: Если взвешенное произведение не помещается в
                расширенную ширину
        """
        w = self.width
        w.require(junior_balance, "junior_balance")
        w.require(senior_balance, "senior_balance")
        w.require(total_fee, "total_fee")
        U16.require(junior_fee_mult_bps, "junior_fee_mult_bps")

        if total_fee == 0 or junior_balance + senior_balance == 0:
            return 0, 0

        junior_weight = self.wide.checked_mul(junior_balance, junior_fee_mult_bps)
        senior_weight = self.wide.checked_mul(senior_balance, BPS_DENOMINATOR)
        total_weight = self.wide.checked_add(junior_weight, senior_weight)
        if total_weight == 0:
            return 0, 0

        junior_fee = self.wide.checked_mul(total_fee, junior_weight) // total_weight
        return junior_fee, w.saturating_sub(total_fee, junior_fee)

    def senior_protected(self, junior_balance: int, senior_balance: int, loss: int) -> bool:
        """True если senior не несёт убытка (loss <= junior_balance)."""
        w = self.width
        w.require(senior_balance, "senior_balance")
        return w.require(loss, "loss") <= w.require(junior_balance, "junior_balance")


PRODUCTION_TRANCHES: Final[TrancheMath] = TrancheMath(PRODUCTION_MATH)

distribute_loss = PRODUCTION_TRANCHES.distribute_loss
distribute_fees = PRODUCTION_TRANCHES.distribute_fees
senior_protected = PRODUCTION_TRANCHES.senior_protected
