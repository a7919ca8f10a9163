"""
Record Contracts — JSON Schema контракты persisted-записей

Processor хранит PoolLedger и Position вне пакета и передаёт их в core как
dict. На границе каждая запись проверяется контрактом (jsonschema,
Draft 2020-12) до построения pydantic модели: контракт фиксирует формат
хранения (все поля обязательны, только u64, без лишних полей), модель —
локальные инварианты.

Схемы (package data, claimpool/core/contracts/schema/):
- pool_ledger.json
- position.json
"""

import json
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


class RecordKind(str, Enum):
    """Тип persisted-записи; значение совпадает с именем файла схемы."""

    POOL_LEDGER = "pool_ledger"
    POSITION = "position"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """Загрузчик и кэш схем из каталога (по умолчанию — schema/ рядом с модулем)."""

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка схемы по имени файла без расширения.

        Raises:
            FileNotFoundError: Файла схемы нет
            ValueError: Схема не проходит meta-validation
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e.message}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# RECORD CONTRACTS
# =============================================================================


class RecordContract:
    """Контракт одного типа записи поверх скомпилированного Draft202012Validator."""

    def __init__(self, kind: RecordKind, loader: SchemaLoader | None = None):
        self.kind = RecordKind(kind)
        self.schema = (loader or _SCHEMA_LOADER).load_schema(self.kind.value)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Запись нарушает контракт (первая найденная ошибка)
        """
        self._validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        return self._validator.iter_errors(data)

    def describe_errors(self, data: Dict[str, Any]) -> list[str]:
        """
        Все нарушения в виде "поле: сообщение", упорядоченные по полю.

        Нарушения уровня записи (лишние или отсутствующие поля) имеют
        префикс "<record>".
        """
        described = []
        for error in self.iter_errors(data):
            field = "/".join(str(part) for part in error.absolute_path) or "<record>"
            described.append(f"{field}: {error.message}")
        return sorted(described)


_CONTRACTS: Dict[RecordKind, RecordContract] = {}


def contract_for(kind: RecordKind) -> RecordContract:
    """Контракт записи из пакетных схем (создаётся один раз на тип)."""
    kind = RecordKind(kind)
    if kind not in _CONTRACTS:
        _CONTRACTS[kind] = RecordContract(kind)
    return _CONTRACTS[kind]


def validate_pool_ledger(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: Запись pool_ledger нарушает контракт
    """
    contract_for(RecordKind.POOL_LEDGER).validate(data)


def validate_position(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: Запись position нарушает контракт
    """
    contract_for(RecordKind.POSITION).validate(data)
