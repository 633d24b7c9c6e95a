"""
Module: realty_kernel.db.base
Responsibility: Declarative base for the record-store ORM models.  Provides
    the string primary key convention and the type annotation map that keeps
    monetary columns on Decimal.
Architecture position: Kernel > DB.  Lowest-level import target; all model
    files import from here.  MUST NOT import from models/, selectors/ or
    outer layers.

Invariants enforced:
    - Decimal maps to Numeric(38, 9).  Money is NEVER stored as float.
    - Primary keys are caller-supplied strings (record-store ids); rows
      created without one receive a uuid4 string.
"""

from datetime import datetime
from decimal import Decimal
from typing import ClassVar
from uuid import uuid4

from sqlalchemy import DateTime, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _new_id() -> str:
    return str(uuid4())


class Base(DeclarativeBase):
    """
    Declarative base for all record-store models.

    Guarantees:
        - id is a String(64) primary key.
        - Decimal maps to Numeric(38, 9).
        - datetime maps to DateTime(timezone=True).
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
    }

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=_new_id,
    )
