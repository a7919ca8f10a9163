"""
Contract Validation Module

JSON Schema контракты persisted-записей пула (PoolLedger, Position).
"""

from .validators import (
    RecordContract,
    RecordKind,
    SchemaLoader,
    contract_for,
    validate_pool_ledger,
    validate_position,
)

__all__ = [
    # Classes
    "RecordKind",
    "RecordContract",
    "SchemaLoader",
    # Functions
    "contract_for",
    "validate_pool_ledger",
    "validate_position",
]
