"""
Core math primitives, domain records, and invariants.

This module contains the foundational building blocks that are independent
of external systems (token programs, insurance reserve, storage, etc.).
"""
