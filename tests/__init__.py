"""
Test suite for claimpool

Contains:
- tests/unit/          : Unit tests for individual modules
- tests/integration/   : Multi-operation sequences (cross-call invariants, reachability)
"""
