"""
Realty Kernel - snapshot and ambient layer for the ledger derivation engine.

Provides:
- Frozen, read-only snapshot types for every source record
- Structured JSON logging and typed exceptions
- SQLAlchemy bridge that loads a snapshot from the record store
"""

__version__ = "0.1.0"
