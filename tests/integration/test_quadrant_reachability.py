"""
Integration tests: достижимость quadrant'ов

ORPHANED_VALUE и VALUELESS_SUPPLY не являются нарушением инвариантов: они
достижимы легитимными последовательностями операций. Проверяется, что
депозиты в них блокируются, а выход из них возможен только через
возврат value / вывод держателей.
"""

import random

from claimpool.core.errors import ErrorCode
from claimpool.core.math import PoolQuadrant
from claimpool.pool import Operation, PoolProcessor, replay


def _quadrants(result) -> list[PoolQuadrant]:
    return [step.state.ledger.quadrant() for step in result.steps]


class TestValuelessSupply:
    """supply > 0, value == 0: вся value выведена в страховой резерв"""

    def test_reached_by_diverting_everything(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 1_000),
                Operation.divert(1_000),
            ]
        )
        assert result.ok
        assert result.final_state.ledger.quadrant() == PoolQuadrant.VALUELESS_SUPPLY

    def test_deposit_and_withdraw_blocked(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 1_000),
                Operation.divert(1_000),
                Operation.deposit("bob", 10),
                Operation.withdraw("alice", 1_000),
            ],
            stop_on_error=False,
        )
        assert result.steps[2].error_code == ErrorCode.FORBIDDEN_STATE
        assert result.steps[3].error_code == ErrorCode.ZERO_AMOUNT

    def test_return_reopens_pool(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 1_000),
                Operation.divert(1_000),
                Operation.return_diverted(1_000),
                Operation.deposit("bob", 1_000),
                Operation.withdraw("bob", 1_000),
            ]
        )
        assert result.ok
        assert result.steps[3].effects["claims_minted"] == 1_000
        assert result.steps[4].effects["collateral"] == 1_000
        assert _quadrants(result) == [
            PoolQuadrant.ACTIVE,
            PoolQuadrant.VALUELESS_SUPPLY,
            PoolQuadrant.ACTIVE,
            PoolQuadrant.ACTIVE,
            PoolQuadrant.ACTIVE,
        ]

    def test_returned_value_not_fully_redeemable(self) -> None:
        """
        После полного возврата value == 1000, но полный вывод дал бы
        (1000 - 1000) - 1000 на промежуточном шаге: вывод отклоняется ошибкой
        core, а не коммитит невычислимый ledger.
        """
        result = replay(
            [
                Operation.deposit("alice", 1_000),
                Operation.divert(1_000),
                Operation.return_diverted(1_000),
                Operation.withdraw("alice", 1_000),
            ]
        )
        assert result.first_failure is result.steps[3]
        assert result.steps[3].error_code == ErrorCode.UNDERFLOW
        assert result.final_state.ledger.current_value() == 1_000

    def test_fully_returned_value_frozen_for_holders(self) -> None:
        """Диверсия всего value и полный возврат: отклоняется даже минимальный вывод"""
        result = replay(
            [
                Operation.deposit("alice", 1_000),
                Operation.divert(1_000),
                Operation.return_diverted(1_000),
                Operation.withdraw("alice", 1),
                Operation.withdraw("alice", 500),
            ],
            stop_on_error=False,
        )
        assert [step.ok for step in result.steps] == [True, True, True, False, False]
        assert result.steps[3].error_code == ErrorCode.UNDERFLOW
        assert result.steps[4].error_code == ErrorCode.UNDERFLOW
        ledger = result.final_state.ledger
        assert ledger.total_withdrawn == 0
        assert ledger.quadrant() == PoolQuadrant.ACTIVE
        assert result.final_state.position("alice").claim_amount == 1_000


class TestOrphanedValue:
    """supply == 0, value > 0: возврат из резерва после выхода всех держателей"""

    OPERATIONS = [
        Operation.deposit("alice", 1_000),
        Operation.divert(400),
        Operation.withdraw("alice", 1_000),
        Operation.return_diverted(400),
    ]

    def test_reached_by_return_after_exit(self) -> None:
        result = replay(self.OPERATIONS)
        assert result.ok
        assert result.steps[2].effects["collateral"] == 600
        assert _quadrants(result) == [
            PoolQuadrant.ACTIVE,
            PoolQuadrant.ACTIVE,
            PoolQuadrant.EMPTY,
            PoolQuadrant.ORPHANED_VALUE,
        ]
        assert result.final_state.ledger.current_value() == 400

    def test_first_new_depositor_cannot_capture(self) -> None:
        result = replay(self.OPERATIONS + [Operation.deposit("mallory", 1)], stop_on_error=False)
        failure = result.first_failure
        assert failure is not None
        assert failure.error_code == ErrorCode.FORBIDDEN_STATE
        assert result.final_state.position("mallory").claim_amount == 0

    def test_orphaned_value_not_divertible(self) -> None:
        """divertible считает lifetime diverted: возврат не увеличивает доступное"""
        result = replay(self.OPERATIONS + [Operation.divert(400)])
        assert result.first_failure.error_code == ErrorCode.INSUFFICIENT_FUNDS
        assert result.final_state.ledger.quadrant() == PoolQuadrant.ORPHANED_VALUE


class TestPartialBurnsStayActive:
    """Частичные выводы без диверсии не покидают ACTIVE / EMPTY"""

    def test_random_deposits_and_withdrawals(self) -> None:
        rng = random.Random(42)
        processor = PoolProcessor()
        holders = ["a", "b", "c", "d"]

        for _ in range(50):
            operations = []
            for _ in range(30):
                holder = rng.choice(holders)
                if rng.random() < 0.5:
                    operations.append(Operation.deposit(holder, rng.randint(1, 10**9)))
                else:
                    operations.append(Operation.withdraw(holder, rng.randint(1, 10**9)))

            result = replay(operations, processor=processor, stop_on_error=False)
            for step in result.steps:
                assert step.state.ledger.quadrant() in (PoolQuadrant.ACTIVE, PoolQuadrant.EMPTY)
