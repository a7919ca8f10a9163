"""
Records — конверсия persisted-записей в модели и обратно

Хранилище записей находится вне пакета; processor получает их как dict
(например, после десериализации) и отдаёт обратно как dict. На границе
запись проверяется JSON Schema контрактом, затем — pydantic моделью.
"""

import logging
from typing import Any, Dict

from claimpool.core.contracts import RecordKind, contract_for
from claimpool.core.domain import PoolLedger, Position

logger = logging.getLogger(__name__)


def _check_contract(kind: RecordKind, data: Dict[str, Any]) -> None:
    contract = contract_for(kind)
    if not contract.is_valid(data):
        logger.warning(f"Rejected {kind.value} record: {'; '.join(contract.describe_errors(data))}")
        contract.validate(data)


def ledger_from_record(data: Dict[str, Any]) -> PoolLedger:
    """
    Загрузка PoolLedger из записи.

    Raises:
        jsonschema.ValidationError: Запись не соответствует контракту
        pydantic.ValidationError: Нарушен локальный инвариант модели
    """
    _check_contract(RecordKind.POOL_LEDGER, data)
    return PoolLedger.model_validate(data)


def ledger_to_record(ledger: PoolLedger) -> Dict[str, Any]:
    return ledger.model_dump()


def position_from_record(data: Dict[str, Any]) -> Position:
    """
    Загрузка Position из записи.

    Raises:
        jsonschema.ValidationError: Запись не соответствует контракту
    """
    _check_contract(RecordKind.POSITION, data)
    return Position.model_validate(data)


def position_to_record(position: Position) -> Dict[str, Any]:
    return position.model_dump()
