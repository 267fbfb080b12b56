"""chesstable — a chess position model with full move legality.

The domain lives in :mod:`chesstable.core`.
"""

__version__ = "0.1.0"
