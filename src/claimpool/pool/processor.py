"""
Pool Processor — reference-реализация commit-семантики внешнего processor'а

Processor связывает записи (PoolLedger, Position), gates и чистые функции
core. Каждая операция:
1. Проверяет параметры запроса и gates
2. Вызывает функции core на полях записей
3. Возвращает НОВЫЕ записи (model_copy) и суммы к переводу

Processor не выполняет I/O и не двигает value: перевод токенов, CPI в
страховой резерв и сохранение записей делает вызывающая сторона — атомарно
с коммитом возвращённых записей. При любой ошибке не возвращается ничего,
т.е. частичное состояние не может быть закоммичено.

Межвызовные инварианты, которые один вызов core проверить не может:
- total_diverted <= total_deposited - total_withdrawn в момент диверсии
  (проверяется в divert через divertible)
- total_returned <= total_diverted (проверяется в return_diverted)
Оба требуют, чтобы caller передавал ПОСЛЕДНЮЮ закоммиченную запись и
сериализовал операции над одним пулом (не более одной in-flight операции).

Кроме того, каждая мутирующая операция проверяет, что value новой записи
вычисляется формулой core; иначе ошибка core пробрасывается и запись не
возвращается.

Известное ограничение: формула вычитает diverted до прибавления returned,
поэтому возвращённое из резерва value доступно держателям только пока
deposited - withdrawn >= diverted. После "диверсия всего value, затем
полный возврат" любой вывод даёт LedgerUnderflow: value пула снова равно
депозитам, но заморожено для держателей до новых депозитов.
"""

import logging
from dataclasses import dataclass

from claimpool.core.domain import PoolLedger, Position
from claimpool.core.errors import ErrorCode, ForbiddenState, LedgerMathError, PoolOperationRejected
from claimpool.core.math.ledger_math import PRODUCTION_MATH, LedgerMath
from claimpool.gatekeeper import Gate00DepositQuadrant, Gate01Capacity, Gate02Cooldown
from claimpool.pool.config import ConfigUpdate, PoolConfig

logger = logging.getLogger(__name__)


# =============================================================================
# OUTCOMES
# =============================================================================


@dataclass(frozen=True)
class DepositOutcome:
    """Результат депозита: новые записи и выпущенные claim-токены."""

    ledger: PoolLedger
    position: Position
    amount: int
    claims_minted: int


@dataclass(frozen=True)
class WithdrawOutcome:
    """Результат вывода: новые записи и value к выплате держателю."""

    ledger: PoolLedger
    position: Position
    claims_burned: int
    collateral: int


@dataclass(frozen=True)
class DiversionOutcome:
    """Результат диверсии или возврата: новый ledger и сумма перевода."""

    ledger: PoolLedger
    amount: int


# =============================================================================
# PROCESSOR
# =============================================================================


class PoolProcessor:
    """
    Stateless processor операций пула.

    Операции:
    - init_pool:        пустой ledger из PoolConfig
    - deposit:          value → пул, выпуск claim-токенов
    - withdraw:         сжигание claim-токенов, выплата доли value
    - divert:           value пула → страховой резерв
    - return_diverted:  страховой резерв → пул
    - update_config:    новые cooldown / capacity
    """

    def __init__(self, ledger_math: LedgerMath = PRODUCTION_MATH):
        self.ledger_math = ledger_math
        self.width = ledger_math.width
        self.quadrant_gate = Gate00DepositQuadrant()
        self.capacity_gate = Gate01Capacity(ledger_math)
        self.cooldown_gate = Gate02Cooldown(ledger_math)

    def _reject(self, code: ErrorCode, message: str) -> PoolOperationRejected:
        logger.info(f"Pool operation rejected: {code.value} ({message})")
        return PoolOperationRejected(code, message)

    def _value(self, ledger: PoolLedger) -> int:
        return ledger.current_value(self.ledger_math)

    def _require_amount(self, amount: int, name: str) -> None:
        self.width.require(amount, name)
        if amount == 0:
            raise self._reject(ErrorCode.ZERO_AMOUNT, f"{name} must be positive")

    def _verify_commit(self, ledger: PoolLedger, operation: str) -> None:
        # value новой записи должно вычисляться тем же порядком операций core
        try:
            self._value(ledger)
        except LedgerMathError as e:
            logger.warning(f"{operation} would commit an uncomputable ledger: {e}")
            raise

    # -------------------------------------------------------------------------
    # INIT / CONFIG
    # -------------------------------------------------------------------------

    def init_pool(self, config: PoolConfig | None = None) -> PoolLedger:
        """Создание пустого ledger'а (EMPTY quadrant)."""
        config = config or PoolConfig()
        ledger = PoolLedger(cooldown_period=config.cooldown_period, capacity=config.capacity)
        logger.debug(
            f"Pool initialized: cooldown_period={config.cooldown_period}, capacity={config.capacity}"
        )
        return ledger

    def update_config(self, ledger: PoolLedger, update: ConfigUpdate) -> PoolLedger:
        """Применение частичного обновления конфигурации."""
        changes = {}
        if update.cooldown_period is not None:
            changes["cooldown_period"] = update.cooldown_period
        if update.capacity is not None:
            changes["capacity"] = update.capacity
        if changes:
            logger.debug(f"Pool config updated: {changes}")
        return ledger.model_copy(update=changes)

    # -------------------------------------------------------------------------
    # DEPOSIT / WITHDRAW
    # -------------------------------------------------------------------------

    def deposit(self, ledger: PoolLedger, position: Position, amount: int, now: int) -> DepositOutcome:
        """
        Депозит value в пул.

        Порядок проверок:
        1. amount > 0
        2. GATE 1 (capacity) против текущего value пула
        3. GATE 0 (quadrant): ORPHANED_VALUE / VALUELESS_SUPPLY → ForbiddenState
        4. Выпуск claim-токенов; 0 выпущенных → ZERO_AMOUNT

        Raises:
            PoolOperationRejected: ZERO_AMOUNT / CAPACITY_EXCEEDED
            ForbiddenState: Пул в запрещённом quadrant'е
            LedgerUnderflow / LedgerOverflow: Арифметика ledger'а
        """
        self._require_amount(amount, "amount")
        self.width.require(now, "now")

        value = self._value(ledger)

        capacity_result = self.capacity_gate.evaluate(value, amount, ledger.capacity)
        if not capacity_result.entry_allowed:
            raise self._reject(ErrorCode.CAPACITY_EXCEEDED, capacity_result.details)

        quadrant_result = self.quadrant_gate.evaluate(ledger.total_claim_supply, value)
        if not quadrant_result.entry_allowed:
            logger.info(f"Deposit blocked by quadrant gate: {quadrant_result.details}")
            raise ForbiddenState(quadrant_result.details)

        minted = self.ledger_math.calc_claims_for_deposit(ledger.total_claim_supply, value, amount)
        if minted == 0:
            raise self._reject(
                ErrorCode.ZERO_AMOUNT,
                f"deposit {amount} mints zero claims at supply={ledger.total_claim_supply}, value={value}",
            )

        w = self.width
        new_ledger = ledger.model_copy(
            update={
                "total_deposited": w.checked_add(ledger.total_deposited, amount),
                "total_claim_supply": w.checked_add(ledger.total_claim_supply, minted),
            }
        )
        self._verify_commit(new_ledger, "deposit")
        new_position = position.model_copy(
            update={
                "claim_amount": w.checked_add(position.claim_amount, minted),
                "last_deposit_time": now,
            }
        )

        logger.debug(f"Deposited {amount}, minted {minted} claims")
        return DepositOutcome(ledger=new_ledger, position=new_position, amount=amount, claims_minted=minted)

    def withdraw(self, ledger: PoolLedger, position: Position, burn: int, now: int) -> WithdrawOutcome:
        """
        Вывод: сжигание claim-токенов за долю value пула.

        Порядок проверок:
        1. burn > 0
        2. GATE 2 (cooldown) от last_deposit_time позиции
        3. burn <= claim_amount позиции
        4. Погашение; 0 к выплате → ZERO_AMOUNT
        5. Value новой записи вычислимо

        Value считается как ((deposited - withdrawn) - diverted) + returned,
        поэтому после возврата из резерва вывод, при котором
        deposited - withdrawn < diverted, не коммитится: такой ledger
        заблокировал бы все последующие операции пула. Если диверсия была
        равна всему value, вывод отклоняется при любом burn.

        Raises:
            PoolOperationRejected: ZERO_AMOUNT / COOLDOWN_NOT_ELAPSED / INSUFFICIENT_CLAIMS
            NoSupply: supply == 0
            LedgerUnderflow: Value новой записи не вычисляется
            LedgerOverflow: Арифметика ledger'а
        """
        self._require_amount(burn, "burn")

        cooldown_result = self.cooldown_gate.evaluate(now, position.last_deposit_time, ledger.cooldown_period)
        if not cooldown_result.withdraw_allowed:
            raise self._reject(ErrorCode.COOLDOWN_NOT_ELAPSED, cooldown_result.details)

        if burn > position.claim_amount:
            raise self._reject(
                ErrorCode.INSUFFICIENT_CLAIMS,
                f"burn {burn} exceeds position claims {position.claim_amount}",
            )

        value = self._value(ledger)
        collateral = self.ledger_math.calc_collateral_for_redeem(ledger.total_claim_supply, value, burn)
        if collateral == 0:
            raise self._reject(
                ErrorCode.ZERO_AMOUNT,
                f"burn {burn} redeems zero value at supply={ledger.total_claim_supply}, value={value}",
            )

        w = self.width
        new_ledger = ledger.model_copy(
            update={
                "total_withdrawn": w.checked_add(ledger.total_withdrawn, collateral),
                "total_claim_supply": w.checked_sub(ledger.total_claim_supply, burn),
            }
        )
        self._verify_commit(new_ledger, "withdraw")
        new_position = position.model_copy(
            update={"claim_amount": w.checked_sub(position.claim_amount, burn)}
        )

        logger.debug(f"Withdrew {collateral}, burned {burn} claims")
        return WithdrawOutcome(ledger=new_ledger, position=new_position, claims_burned=burn, collateral=collateral)

    # -------------------------------------------------------------------------
    # DIVERSION / RETURN
    # -------------------------------------------------------------------------

    def divert(self, ledger: PoolLedger, amount: int) -> DiversionOutcome:
        """
        Диверсия value пула в страховой резерв.

        amount ограничен divertible (deposited - withdrawn - diverted, clamp к 0).
        Supply claim-токенов не меняется.

        Raises:
            PoolOperationRejected: ZERO_AMOUNT / INSUFFICIENT_FUNDS
        """
        self._require_amount(amount, "amount")

        available = self.ledger_math.divertible_amount(
            ledger.total_deposited, ledger.total_withdrawn, ledger.total_diverted
        )
        if amount > available:
            raise self._reject(
                ErrorCode.INSUFFICIENT_FUNDS,
                f"divert {amount} exceeds divertible {available}",
            )

        new_ledger = ledger.model_copy(
            update={"total_diverted": self.width.checked_add(ledger.total_diverted, amount)}
        )
        self._verify_commit(new_ledger, "divert")
        logger.debug(f"Diverted {amount} to insurance reserve")
        return DiversionOutcome(ledger=new_ledger, amount=amount)

    def return_diverted(self, ledger: PoolLedger, amount: int) -> DiversionOutcome:
        """
        Возврат ранее выведенного value из страхового резерва в пул.

        Raises:
            PoolOperationRejected: ZERO_AMOUNT / RETURN_EXCEEDS_DIVERTED
            LedgerOverflow: Value новой записи превышает max
        """
        self._require_amount(amount, "amount")

        outstanding = ledger.outstanding_diversion()
        if amount > outstanding:
            raise self._reject(
                ErrorCode.RETURN_EXCEEDS_DIVERTED,
                f"return {amount} exceeds outstanding diversion {outstanding}",
            )

        new_ledger = ledger.model_copy(
            update={"total_returned": self.width.checked_add(ledger.total_returned, amount)}
        )
        self._verify_commit(new_ledger, "return")
        logger.debug(f"Returned {amount} from insurance reserve")
        return DiversionOutcome(ledger=new_ledger, amount=amount)
