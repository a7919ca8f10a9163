"""
Replay — прогон последовательностей операций над пулом

Моделирует внешний processor целиком: ledger пула + позиции нескольких
держателей, операции применяются строго последовательно (одна in-flight
операция на пул), каждая — на последнем закоммиченном состоянии.

Отклонённая операция (ошибка core или отказ processor'а) не меняет состояние
и фиксируется в StepResult. После каждой успешной операции проверяются
инварианты; их нарушение — дефект processor'а/core и поднимает
InvariantViolation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Mapping, Optional

from claimpool.core.domain import PoolLedger, Position
from claimpool.core.errors import ErrorCode, LedgerMathError, PoolOperationRejected
from claimpool.pool.config import ConfigUpdate, PoolConfig
from claimpool.pool.invariants import check_ledger_invariants, check_position_invariants
from claimpool.pool.processor import PoolProcessor


class InvariantViolation(Exception):
    """Закоммиченное состояние нарушает инварианты ledger'а."""

    def __init__(self, violations: list[str], operation: "Operation"):
        super().__init__(f"invariants violated after {operation.kind.value}: {', '.join(violations)}")
        self.violations = violations
        self.operation = operation


# =============================================================================
# OPERATIONS
# =============================================================================


class OperationKind(str, Enum):
    """Тип операции над пулом."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    DIVERT = "divert"
    RETURN = "return"
    UPDATE_CONFIG = "update_config"


@dataclass(frozen=True)
class Operation:
    """Одна операция trace'а."""

    kind: OperationKind
    amount: int = 0
    holder: Optional[str] = None
    time: int = 0
    update: Optional[ConfigUpdate] = None

    @classmethod
    def deposit(cls, holder: str, amount: int, time: int = 0) -> "Operation":
        return cls(OperationKind.DEPOSIT, amount=amount, holder=holder, time=time)

    @classmethod
    def withdraw(cls, holder: str, burn: int, time: int = 0) -> "Operation":
        return cls(OperationKind.WITHDRAW, amount=burn, holder=holder, time=time)

    @classmethod
    def divert(cls, amount: int) -> "Operation":
        return cls(OperationKind.DIVERT, amount=amount)

    @classmethod
    def return_diverted(cls, amount: int) -> "Operation":
        return cls(OperationKind.RETURN, amount=amount)

    @classmethod
    def update_config(cls, update: ConfigUpdate) -> "Operation":
        return cls(OperationKind.UPDATE_CONFIG, update=update)


# =============================================================================
# STATE / RESULTS
# =============================================================================


@dataclass(frozen=True)
class PoolState:
    """Снапшот пула: ledger и позиции держателей."""

    ledger: PoolLedger
    positions: Mapping[str, Position] = field(default_factory=dict)

    def position(self, holder: str) -> Position:
        return self.positions.get(holder, Position())

    def with_position(self, ledger: PoolLedger, holder: str, position: Position) -> "PoolState":
        positions = dict(self.positions)
        positions[holder] = position
        return PoolState(ledger=ledger, positions=positions)

    def redeemable(self, holder: str, processor: PoolProcessor) -> int:
        """Сколько value получил бы держатель при полном погашении прямо сейчас."""
        claims = self.position(holder).claim_amount
        if self.ledger.total_claim_supply == 0:
            return 0
        value = self.ledger.current_value(processor.ledger_math)
        return processor.ledger_math.calc_collateral_for_redeem(self.ledger.total_claim_supply, value, claims)


@dataclass(frozen=True)
class StepResult:
    """Результат одной операции; при отказе state == состояние до операции."""

    ok: bool
    operation: Operation
    state: PoolState
    effects: Mapping[str, int] = field(default_factory=dict)
    error_code: Optional[ErrorCode] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class ReplayResult:
    """Результат прогона trace'а."""

    steps: list[StepResult]
    final_state: PoolState

    @property
    def ok(self) -> bool:
        return all(step.ok for step in self.steps)

    @property
    def first_failure(self) -> Optional[StepResult]:
        return next((step for step in self.steps if not step.ok), None)


# =============================================================================
# APPLY / REPLAY
# =============================================================================


def _require_holder(operation: Operation) -> str:
    if not operation.holder:
        raise ValueError(f"{operation.kind.value} requires a holder")
    return operation.holder


def _execute(state: PoolState, operation: Operation, processor: PoolProcessor) -> tuple[PoolState, dict[str, int]]:
    ledger = state.ledger

    if operation.kind == OperationKind.DEPOSIT:
        holder = _require_holder(operation)
        outcome = processor.deposit(ledger, state.position(holder), operation.amount, operation.time)
        return (
            state.with_position(outcome.ledger, holder, outcome.position),
            {"amount": outcome.amount, "claims_minted": outcome.claims_minted},
        )

    if operation.kind == OperationKind.WITHDRAW:
        holder = _require_holder(operation)
        outcome = processor.withdraw(ledger, state.position(holder), operation.amount, operation.time)
        return (
            state.with_position(outcome.ledger, holder, outcome.position),
            {"claims_burned": outcome.claims_burned, "collateral": outcome.collateral},
        )

    if operation.kind == OperationKind.DIVERT:
        outcome = processor.divert(ledger, operation.amount)
        return PoolState(outcome.ledger, state.positions), {"diverted": outcome.amount}

    if operation.kind == OperationKind.RETURN:
        outcome = processor.return_diverted(ledger, operation.amount)
        return PoolState(outcome.ledger, state.positions), {"returned": outcome.amount}

    if operation.kind == OperationKind.UPDATE_CONFIG:
        if operation.update is None:
            raise ValueError("update_config requires an update")
        return PoolState(processor.update_config(ledger, operation.update), state.positions), {}

    raise ValueError(f"Unknown operation kind: {operation.kind}")


def apply_operation(state: PoolState, operation: Operation, processor: PoolProcessor) -> StepResult:
    """
    Применение одной операции к закоммиченному состоянию.

    Returns:
        StepResult: ok=True с новым состоянием, либо ok=False с кодом ошибки и
        исходным состоянием

    Raises:
        InvariantViolation: Новое состояние нарушает инварианты
        ValueError: Некорректная операция (нет holder, значения вне u64, ...)
    """
    try:
        new_state, effects = _execute(state, operation, processor)
    except (LedgerMathError, PoolOperationRejected) as e:
        return StepResult(
            ok=False,
            operation=operation,
            state=state,
            error_code=e.code,
            error=str(e),
        )

    violations = check_ledger_invariants(new_state.ledger, processor.ledger_math)
    violations += check_position_invariants(new_state.ledger, new_state.positions.values())
    if violations:
        raise InvariantViolation(violations, operation)

    return StepResult(ok=True, operation=operation, state=new_state, effects=effects)


def replay(
    operations: Iterable[Operation],
    config: Optional[PoolConfig] = None,
    processor: Optional[PoolProcessor] = None,
    initial_state: Optional[PoolState] = None,
    stop_on_error: bool = True,
) -> ReplayResult:
    """
    Прогон trace'а операций.

    Args:
        operations: Операции в порядке исполнения
        config: Конфигурация нового пула (если initial_state не задан)
        processor: Processor (default: PoolProcessor() продакшн-ширины)
        initial_state: Стартовое состояние вместо нового пустого пула
        stop_on_error: Остановиться на первой отклонённой операции

    Returns:
        ReplayResult со всеми StepResult и финальным состоянием
    """
    processor = processor or PoolProcessor()
    state = initial_state or PoolState(ledger=processor.init_pool(config))

    steps: list[StepResult] = []
    for operation in operations:
        result = apply_operation(state, operation, processor)
        steps.append(result)
        state = result.state
        if not result.ok and stop_on_error:
            break

    return ReplayResult(steps=steps, final_state=state)
