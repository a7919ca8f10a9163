"""
Unit tests for Gatekeeper gates

GATE 0: Deposit Quadrant
GATE 1: Capacity
GATE 2: Withdrawal Cooldown
"""

import pytest

from claimpool.core.math import NARROW_MATH, U64_MAX, PoolQuadrant
from claimpool.gatekeeper import Gate00DepositQuadrant, Gate01Capacity, Gate02Cooldown


# =============================================================================
# GATE 0
# =============================================================================


class TestGate00DepositQuadrant:
    """Тесты GATE 0"""

    @pytest.fixture
    def gate(self) -> Gate00DepositQuadrant:
        return Gate00DepositQuadrant()

    def test_empty_pool_allowed(self, gate: Gate00DepositQuadrant) -> None:
        result = gate.evaluate(supply=0, value=0)
        assert result.entry_allowed is True
        assert result.block_reason == ""
        assert result.quadrant == PoolQuadrant.EMPTY
        assert "PASS" in result.details

    def test_active_pool_allowed(self, gate: Gate00DepositQuadrant) -> None:
        result = gate.evaluate(supply=1000, value=2000)
        assert result.entry_allowed is True
        assert result.quadrant == PoolQuadrant.ACTIVE

    def test_orphaned_value_blocked(self, gate: Gate00DepositQuadrant) -> None:
        result = gate.evaluate(supply=0, value=500)
        assert result.entry_allowed is False
        assert result.block_reason == "orphaned_value"
        assert result.quadrant == PoolQuadrant.ORPHANED_VALUE

    def test_valueless_supply_blocked(self, gate: Gate00DepositQuadrant) -> None:
        result = gate.evaluate(supply=500, value=0)
        assert result.entry_allowed is False
        assert result.block_reason == "valueless_supply"
        assert result.supply == 500
        assert result.value == 0


# =============================================================================
# GATE 1
# =============================================================================


class TestGate01Capacity:
    """Тесты GATE 1"""

    @pytest.fixture
    def gate(self) -> Gate01Capacity:
        return Gate01Capacity()

    def test_uncapped(self, gate: Gate01Capacity) -> None:
        result = gate.evaluate(current_value=10**15, deposit=10**15, capacity=0)
        assert result.entry_allowed is True
        assert result.details == "PASS: uncapped"

    def test_exactly_at_capacity(self, gate: Gate01Capacity) -> None:
        result = gate.evaluate(current_value=900, deposit=100, capacity=1000)
        assert result.entry_allowed is True
        assert result.new_total == 1000
        assert result.details == "PASS: 1000/1000"

    def test_one_above_capacity(self, gate: Gate01Capacity) -> None:
        result = gate.evaluate(current_value=900, deposit=101, capacity=1000)
        assert result.entry_allowed is False
        assert result.block_reason == "capacity_exceeded"
        assert result.new_total == 1001

    def test_overflow_blocked(self, gate: Gate01Capacity) -> None:
        result = gate.evaluate(current_value=U64_MAX, deposit=1, capacity=U64_MAX)
        assert result.entry_allowed is False
        assert result.new_total is None
        assert "overflows" in result.details

    def test_narrow_width(self) -> None:
        gate = Gate01Capacity(NARROW_MATH)
        assert gate.evaluate(current_value=200, deposit=55, capacity=255).entry_allowed is True
        result = gate.evaluate(current_value=200, deposit=56, capacity=255)
        assert result.entry_allowed is False
        assert result.new_total is None


# =============================================================================
# GATE 2
# =============================================================================


class TestGate02Cooldown:
    """Тесты GATE 2"""

    T = 1_700_000_000

    @pytest.fixture
    def gate(self) -> Gate02Cooldown:
        return Gate02Cooldown()

    def test_locked_within_cooldown(self, gate: Gate02Cooldown) -> None:
        result = gate.evaluate(current_time=self.T + 10, last_deposit_time=self.T, cooldown_period=50)
        assert result.withdraw_allowed is False
        assert result.block_reason == "cooldown_not_elapsed"
        assert result.unlock_time == self.T + 50
        assert result.remaining == 40

    def test_unlocked_at_boundary(self, gate: Gate02Cooldown) -> None:
        result = gate.evaluate(current_time=self.T + 50, last_deposit_time=self.T, cooldown_period=50)
        assert result.withdraw_allowed is True
        assert result.remaining == 0

    def test_zero_cooldown(self, gate: Gate02Cooldown) -> None:
        result = gate.evaluate(current_time=self.T, last_deposit_time=self.T, cooldown_period=0)
        assert result.withdraw_allowed is True

    def test_saturated_unlock_time(self, gate: Gate02Cooldown) -> None:
        result = gate.evaluate(current_time=0, last_deposit_time=U64_MAX - 1, cooldown_period=U64_MAX)
        assert result.withdraw_allowed is False
        assert result.unlock_time == U64_MAX
        assert result.remaining == U64_MAX

    def test_time_before_deposit_is_locked(self, gate: Gate02Cooldown) -> None:
        """Время "назад" относительно депозита не открывает вывод"""
        result = gate.evaluate(current_time=self.T - 1, last_deposit_time=self.T, cooldown_period=0)
        assert result.withdraw_allowed is False
        assert result.remaining == 1
