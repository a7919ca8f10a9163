"""
Integration tests: сценарии нескольких депозиторов через replay

Каждый сценарий прогоняется через PoolProcessor целиком (ledger + позиции),
после каждой операции проверяются инварианты.
"""

import pytest

from claimpool.core.errors import ErrorCode
from claimpool.pool import ConfigUpdate, Operation, OperationKind, PoolConfig, PoolProcessor, replay

T = 1_700_000_000


def _collateral(result) -> int:
    return sum(step.effects.get("collateral", 0) for step in result.steps if step.ok)


class TestConservationFlows:
    """Сохранение value при входах и выходах"""

    def test_single_depositor_exact_roundtrip(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 1_000_000),
                Operation.withdraw("alice", 1_000_000),
            ]
        )
        assert result.ok
        assert result.steps[1].effects["collateral"] == 1_000_000
        assert result.final_state.ledger.total_claim_supply == 0

    def test_two_depositors_conservation(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 1_000_000),
                Operation.deposit("bob", 500_000),
                Operation.withdraw("alice", 1_000_000),
                Operation.withdraw("bob", 500_000),
            ]
        )
        assert result.ok
        assert _collateral(result) == 1_500_000
        assert result.final_state.ledger.total_claim_supply == 0

    def test_three_depositors_fairness(self) -> None:
        amounts = {"a": 1_000_000, "b": 2_000_000, "c": 3_000_000}
        deposits = [Operation.deposit(holder, amount) for holder, amount in amounts.items()]
        state = replay(deposits).final_state

        for holder, amount in amounts.items():
            back = state.redeemable(holder, processor=PoolProcessor())
            assert amount - 1 <= back <= amount + 1

    def test_three_depositors_reverse_exit(self) -> None:
        result = replay(
            [
                Operation.deposit("a", 100),
                Operation.deposit("b", 200),
                Operation.deposit("c", 50),
                Operation.withdraw("c", 50),
                Operation.withdraw("b", 200),
                Operation.withdraw("a", 100),
            ]
        )
        assert result.ok
        assert [step.effects.get("claims_minted") for step in result.steps[:3]] == [100, 200, 50]
        assert _collateral(result) == 350

    def test_multiple_cycles_dust_is_tiny(self) -> None:
        operations = []
        for i in range(1, 11):
            amount = i * 100_000
            operations += [Operation.deposit("alice", amount), Operation.withdraw("alice", amount)]

        result = replay(operations)
        assert result.ok
        total_in = sum(i * 100_000 for i in range(1, 11))
        total_out = _collateral(result)
        assert total_out <= total_in
        assert total_in - total_out <= 10


class TestAppreciationAndDiversion:
    """Рост и диверсия value при нескольких держателях"""

    def test_diversion_shared_pro_rata(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 3_000),
                Operation.deposit("bob", 1_000),
                Operation.divert(2_000),
                Operation.withdraw("alice", 3_000),
                Operation.withdraw("bob", 1_000),
            ]
        )
        assert result.ok
        assert result.steps[3].effects["collateral"] == 1_500
        assert result.steps[4].effects["collateral"] == 500

    def test_return_benefits_remaining_holders(self) -> None:
        """Alice выходит с потерей, возврат достаётся оставшемуся Bob"""
        result = replay(
            [
                Operation.deposit("alice", 1_000),
                Operation.deposit("bob", 1_000),
                Operation.divert(1_000),
                Operation.withdraw("alice", 1_000),
                Operation.return_diverted(1_000),
                Operation.deposit("carol", 1_500),
                Operation.withdraw("bob", 1_000),
            ]
        )
        assert result.ok
        assert result.steps[3].effects["collateral"] == 500
        assert result.steps[5].effects["claims_minted"] == 1_000
        assert result.steps[6].effects["collateral"] == 1_500

    def test_late_depositor_pays_current_price(self) -> None:
        """После диверсии claim дешевле: новый депозитор получает больше claims"""
        result = replay(
            [
                Operation.deposit("alice", 1_000),
                Operation.divert(500),
                Operation.deposit("bob", 500),
            ]
        )
        assert result.ok
        assert result.steps[2].effects["claims_minted"] == 1_000


class TestCooldownAndCapacityFlows:
    """Cooldown и capacity в многошаговых сценариях"""

    def test_cooldown_per_holder(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 1_000, time=T),
                Operation.deposit("bob", 1_000, time=T + 40),
                Operation.withdraw("alice", 100, time=T + 50),
                Operation.withdraw("bob", 100, time=T + 50),
                Operation.withdraw("bob", 100, time=T + 90),
            ],
            config=PoolConfig(cooldown_period=50),
            stop_on_error=False,
        )
        assert [step.ok for step in result.steps] == [True, True, True, False, True]
        assert result.steps[3].error_code == ErrorCode.COOLDOWN_NOT_ELAPSED

    def test_redeposit_restarts_cooldown(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 1_000, time=T),
                Operation.deposit("alice", 1, time=T + 45),
                Operation.withdraw("alice", 100, time=T + 50),
            ],
            config=PoolConfig(cooldown_period=50),
            stop_on_error=False,
        )
        assert result.steps[2].error_code == ErrorCode.COOLDOWN_NOT_ELAPSED

    def test_capacity_frees_up_after_withdrawal(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 1_000),
                Operation.deposit("bob", 1),
                Operation.withdraw("alice", 600),
                Operation.deposit("bob", 600),
            ],
            config=PoolConfig(capacity=1_000),
            stop_on_error=False,
        )
        assert [step.ok for step in result.steps] == [True, False, True, True]
        assert result.steps[1].error_code == ErrorCode.CAPACITY_EXCEEDED
        assert result.final_state.ledger.current_value() == 1_000

    def test_raising_capacity_reopens_pool(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 1_000),
                Operation.update_config(ConfigUpdate(capacity=2_000)),
                Operation.deposit("bob", 1_000),
            ],
            config=PoolConfig(capacity=1_000),
        )
        assert result.ok
        assert result.final_state.ledger.capacity == 2_000


class TestReplayMechanics:
    """Поведение replay на отказах"""

    def test_stops_on_first_error(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 0),
                Operation.deposit("alice", 10),
            ]
        )
        assert len(result.steps) == 1
        assert not result.ok
        assert result.first_failure.error_code == ErrorCode.ZERO_AMOUNT

    def test_rejected_step_keeps_state(self) -> None:
        result = replay(
            [
                Operation.deposit("alice", 100),
                Operation.withdraw("alice", 101),
            ],
            stop_on_error=False,
        )
        assert result.steps[1].state == result.steps[0].state
        assert result.steps[1].error_code == ErrorCode.INSUFFICIENT_CLAIMS

    def test_operation_without_holder(self) -> None:
        with pytest.raises(ValueError, match="requires a holder"):
            replay([Operation(OperationKind.DEPOSIT, amount=1)])