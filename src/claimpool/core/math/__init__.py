"""
Core math modules для claimpool

Чистые целочисленные формулы accounting core с гарантией отсутствия
усечения и wraparound.
"""

# Checked integers
from claimpool.core.math.checked_int import (
    U8,
    U16,
    U32,
    U64,
    U64_MAX,
    U128,
    IntWidth,
)

# Quadrant'ы пула
from claimpool.core.math.quadrant import PoolQuadrant, classify_quadrant

# Ledger math
from claimpool.core.math.ledger_math import (
    NARROW_MATH,
    PRODUCTION_MATH,
    UNCAPPED,
    LedgerMath,
    calc_claims_for_deposit,
    calc_collateral_for_redeem,
    cooldown_elapsed,
    divertible_amount,
    exceeds_capacity,
    pool_value,
    pool_value_with_diversion,
    pool_value_with_fees,
)

# Tranche math
from claimpool.core.math.tranche_math import (
    BPS_DENOMINATOR,
    PRODUCTION_TRANCHES,
    TrancheMath,
    distribute_fees,
    distribute_loss,
    senior_protected,
)

__all__ = [
    # Checked integers — Types
    "IntWidth",
    # Checked integers — Widths
    "U8",
    "U16",
    "U32",
    "U64",
    "U64_MAX",
    "U128",
    # Quadrant
    "PoolQuadrant",
    "classify_quadrant",
    # Ledger math — Constants
    "UNCAPPED",
    # Ledger math — Instances
    "LedgerMath",
    "NARROW_MATH",
    "PRODUCTION_MATH",
    # Ledger math — Functions
    "calc_claims_for_deposit",
    "calc_collateral_for_redeem",
    "cooldown_elapsed",
    "divertible_amount",
    "exceeds_capacity",
    "pool_value",
    "pool_value_with_diversion",
    "pool_value_with_fees",
    # Tranche math — Constants
    "BPS_DENOMINATOR",
    # Tranche math — Instances
    "PRODUCTION_TRANCHES",
    "TrancheMath",
    # Tranche math — Functions
    "distribute_fees",
    "distribute_loss",
    "senior_protected",
]
