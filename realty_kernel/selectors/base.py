"""
Module: realty_kernel.selectors.base
Responsibility: Abstract base class for read-only selectors.
Architecture position: Kernel > Selectors.  May import from db/ and models/.

Invariants enforced:
    - Read-only access: selectors accept a Session from the caller and never
      call add(), delete(), commit() or flush().
    - Selectors return frozen dataclasses, not ORM instances.
    - The caller owns the session and its transaction scope.
"""

from abc import ABC

from sqlalchemy.orm import Session


class BaseSelector(ABC):
    """Base for all selectors; stores the caller's session."""

    def __init__(self, session: Session):
        self.session = session
