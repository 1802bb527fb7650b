"""
Module: shop_kernel.db.base
Responsibility: Declarative base for the SQLAlchemy models that mirror the
    shop's record store.  Provides the type annotation map that keeps column
    types consistent across the five record tables.
Architecture position: Kernel > DB.  Lowest-level import target within the
    kernel.  MUST NOT import from models/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Opaque string primary keys: the store owns identifier generation; the
      kernel never interprets ids.
    - Decimal precision: Decimal maps to Numeric(14, 4).  NEVER float.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar

from sqlalchemy import Date, DateTime, Numeric, String
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Declarative base for all store models.

    Guarantees:
        - Decimal maps to Numeric(14, 4).
        - date maps to Date, datetime to timezone-aware DateTime.
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(14, 4),
        date: Date,
        datetime: DateTime(timezone=True),
        str: String(255),
    }
