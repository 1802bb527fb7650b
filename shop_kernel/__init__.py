"""
Shop Kernel

Record model, clock, typed errors, structured logging, and the read-only
data-access layer for the labor profitability dashboard:
- Immutable Decimal-based records
- Snapshot reads of the five record tables
- JSON-lines logging with request-scoped context
"""

__version__ = "0.1.0"
