"""
Ledger Math — чистые формулы claim-токенов, value пула и диверсии

Единая generic-реализация LedgerMath(width), параметризованная шириной
целочисленного типа. Инстанцируется дважды:
- PRODUCTION_MATH = LedgerMath(U64): продакшн-ширина (u64, промежуточные u128)
- NARROW_MATH     = LedgerMath(U8):  узкое зеркало для исчерпывающей проверки

Обе инстанции исполняют одни и те же функции; узкое зеркало не может
"потерять" финальную проверку диапазона, потому что кода зеркала не существует.

Компоненты:
- Pool Ledger Formulae  : pool_value, pool_value_with_diversion, pool_value_with_fees
- Issuance Calculator   : calc_claims_for_deposit (четыре quadrant'а)
- Redemption Calculator : calc_collateral_for_redeem
- Diversion Accountant  : divertible_amount
- Cooldown Gate         : cooldown_elapsed
- Capacity Guard        : exceeds_capacity

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Округление всегда floor (в пользу пула, против нового участника)
2. Произведения считаются в расширенной ширине; результат > max → LedgerOverflow
3. Value пула никогда не отрицательно: underflow → LedgerUnderflow, не clamp
4. Все функции детерминированы и не имеют side effects
"""

from typing import Final

from claimpool.core.errors import ForbiddenState, LedgerUnderflow, NoSupply
from claimpool.core.math.checked_int import U8, U64, IntWidth
from claimpool.core.math.quadrant import PoolQuadrant, classify_quadrant

# Capacity == 0 означает "без лимита"
UNCAPPED: Final[int] = 0


class LedgerMath:
    """
    Набор чистых функций accounting core для заданной ширины типа.

    Все аргументы валидируются через IntWidth.require: значения вне диапазона
    типа — ошибка вызывающего (ValueError), а не арифметический результат.
    """

    def __init__(self, width: IntWidth):
        self.width = width
        self.wide = width.widened

    def __repr__(self) -> str:
        return f"LedgerMath({self.width.name})"

    # =========================================================================
    # POOL LEDGER FORMULAE
    # =========================================================================

    def pool_value(self, deposited: int, withdrawn: int) -> int:
        """
        Value пула без учёта диверсии: deposited - withdrawn.

        Raises:
            LedgerUnderflow: Если withdrawn > deposited

        Examples:
            >>> pool_value(1000, 300)
            700
        """
        w = self.width
        return w.checked_sub(w.require(deposited, "deposited"), w.require(withdrawn, "withdrawn"))

    def pool_value_with_diversion(
        self,
        deposited: int,
        withdrawn: int,
        diverted: int,
        returned: int,
    ) -> int:
        """
        Текущее value пула: ((deposited - withdrawn) - diverted) + returned.

        Три checked-операции строго в этом порядке. Промежуточные результаты
        не clamp'ятся: первая операция, ушедшая в минус, даёт LedgerUnderflow.

        Args:
            deposited: total_deposited
            withdrawn: total_withdrawn
            diverted: total_diverted (выведено в страховой резерв)
            returned: total_returned (возвращено из резерва)

        Returns:
            Текущее value пула

        Raises:
            LedgerUnderflow: Если любое вычитание уходит в минус
            LedgerOverflow: Если финальное сложение превышает max
        """
        w = self.width
        net = w.checked_sub(w.require(deposited, "deposited"), w.require(withdrawn, "withdrawn"))
        net = w.checked_sub(net, w.require(diverted, "diverted"))
        return w.checked_add(net, w.require(returned, "returned"))

    def pool_value_with_fees(self, deposited: int, withdrawn: int, fees_earned: int) -> int:
        """
        Value пула с накопленными торговыми комиссиями: (deposited - withdrawn) + fees.

        Raises:
            LedgerUnderflow: Если withdrawn > deposited
            LedgerOverflow: Если сумма превышает max
        """
        net = self.pool_value(deposited, withdrawn)
        return self.width.checked_add(net, self.width.require(fees_earned, "fees_earned"))

    # =========================================================================
    # ISSUANCE / REDEMPTION
    # =========================================================================

    def _pro_rata(self, amount: int, numerator: int, denominator: int) -> int:
        # floor(amount * numerator / denominator) в расширенной ширине
        product = self.wide.checked_mul(amount, numerator)
        return self.wide.narrow(product // denominator, self.width)

    def calc_claims_for_deposit(self, supply: int, value: int, deposit: int) -> int:
        """
        Количество claim-токенов для депозита.

        Quadrant'ы:
            EMPTY            → deposit (1:1)
            ORPHANED_VALUE   → ForbiddenState
            VALUELESS_SUPPLY → ForbiddenState
            ACTIVE           → floor(deposit * supply / value)

        Депозит 0 проходит через ту же логику (в ACTIVE даёт 0, в запрещённых
        quadrant'ах — отказ).

        Args:
            supply: total_claim_supply
            value: текущее value пула
            deposit: сумма депозита

        Returns:
            Claim-токены к выпуску (добавляются к supply; deposit — к deposited)

        Raises:
            ForbiddenState: supply/value в запрещённом quadrant'е
            LedgerOverflow: Истинный результат не помещается в тип

        Examples:
            >>> calc_claims_for_deposit(0, 0, 1000)
            1000
            >>> calc_claims_for_deposit(1000, 2000, 500)
            250
        """
        w = self.width
        w.require(supply, "supply")
        w.require(value, "value")
        w.require(deposit, "deposit")

        quadrant = classify_quadrant(supply, value)
        if quadrant == PoolQuadrant.EMPTY:
            return deposit
        if quadrant == PoolQuadrant.ORPHANED_VALUE:
            raise ForbiddenState(
                f"deposit blocked: orphaned value {value} with zero claim supply"
            )
        if quadrant == PoolQuadrant.VALUELESS_SUPPLY:
            raise ForbiddenState(
                f"deposit blocked: claim supply {supply} with zero pool value"
            )
        return self._pro_rata(deposit, supply, value)

    def calc_collateral_for_redeem(self, supply: int, value: int, burn: int) -> int:
        """
        Value к выплате за сжигание claim-токенов: floor(burn * value / supply).

        Полное сжигание (burn == supply) возвращает ровно value; частичное —
        не больше полного. Функция монотонна по burn.

        Raises:
            NoSupply: Если supply == 0
            LedgerUnderflow: Если burn > supply (сжигается больше, чем в обращении)
        """
        w = self.width
        w.require(supply, "supply")
        w.require(value, "value")
        w.require(burn, "burn")

        if supply == 0:
            raise NoSupply("redemption blocked: no claim supply outstanding")
        if burn > supply:
            raise LedgerUnderflow(f"redemption blocked: burn {burn} exceeds claim supply {supply}")
        return self._pro_rata(burn, value, supply)

    # =========================================================================
    # DIVERSION ACCOUNTANT
    # =========================================================================

    def divertible_amount(self, deposited: int, withdrawn: int, already_diverted: int) -> int:
        """
        Сколько ещё можно вывести в страховой резерв.

        max(0, max(0, deposited - withdrawn) - already_diverted).

        В отличие от pool_value, никогда не падает: "доступно 0" — валидное
        стационарное состояние, а не ошибка.
        """
        w = self.width
        net = w.saturating_sub(w.require(deposited, "deposited"), w.require(withdrawn, "withdrawn"))
        return w.saturating_sub(net, w.require(already_diverted, "already_diverted"))

    # =========================================================================
    # COOLDOWN / CAPACITY
    # =========================================================================

    def cooldown_elapsed(self, current_time: int, deposit_time: int, cooldown: int) -> bool:
        """
        Истёк ли cooldown: current_time >= deposit_time + cooldown.

        Сумма считается с насыщением (clamp к max, без wraparound). Граница
        включительная; cooldown == 0 — вывод доступен сразу.
        """
        w = self.width
        unlock_time = w.saturating_add(w.require(deposit_time, "deposit_time"), w.require(cooldown, "cooldown"))
        return w.require(current_time, "current_time") >= unlock_time

    def exceeds_capacity(self, current_total: int, deposit: int, capacity: int) -> bool:
        """
        Превышает ли депозит capacity пула.

        capacity == 0 → никогда (без лимита). Переполнение суммы считается
        превышением. Ровно capacity — не превышение.
        """
        w = self.width
        w.require(current_total, "current_total")
        w.require(deposit, "deposit")
        if w.require(capacity, "capacity") == UNCAPPED:
            return False
        new_total = current_total + deposit
        if not w.fits(new_total):
            return True
        return new_total > capacity


# =============================================================================
# ИНСТАНЦИИ
# =============================================================================

PRODUCTION_MATH: Final[LedgerMath] = LedgerMath(U64)
NARROW_MATH: Final[LedgerMath] = LedgerMath(U8)

pool_value = PRODUCTION_MATH.pool_value
pool_value_with_diversion = PRODUCTION_MATH.pool_value_with_diversion
pool_value_with_fees = PRODUCTION_MATH.pool_value_with_fees
calc_claims_for_deposit = PRODUCTION_MATH.calc_claims_for_deposit
calc_collateral_for_redeem = PRODUCTION_MATH.calc_collateral_for_redeem
divertible_amount = PRODUCTION_MATH.divertible_amount
cooldown_elapsed = PRODUCTION_MATH.cooldown_elapsed
exceeds_capacity = PRODUCTION_MATH.exceeds_capacity
