"""Pool — reference processor, инварианты и replay операций пула.

Слой над чистым core: связывает записи PoolLedger/Position, gates и формулы,
возвращает новые записи, которые вызывающая сторона коммитит атомарно с
переводами value.
"""

from .config import DEFAULT_COOLDOWN_PERIOD, ConfigUpdate, PoolConfig
from .invariants import check_ledger_invariants, check_position_invariants
from .processor import DepositOutcome, DiversionOutcome, PoolProcessor, WithdrawOutcome
from .records import (
    ledger_from_record,
    ledger_to_record,
    position_from_record,
    position_to_record,
)
from .replay import (
    InvariantViolation,
    Operation,
    OperationKind,
    PoolState,
    ReplayResult,
    StepResult,
    apply_operation,
    replay,
)

__all__ = [
    # Config
    "DEFAULT_COOLDOWN_PERIOD",
    "ConfigUpdate",
    "PoolConfig",
    # Processor
    "PoolProcessor",
    "DepositOutcome",
    "WithdrawOutcome",
    "DiversionOutcome",
    # Invariants
    "check_ledger_invariants",
    "check_position_invariants",
    # Records
    "ledger_from_record",
    "ledger_to_record",
    "position_from_record",
    "position_to_record",
    # Replay
    "InvariantViolation",
    "Operation",
    "OperationKind",
    "PoolState",
    "ReplayResult",
    "StepResult",
    "apply_operation",
    "replay",
]
