"""
locks.py
- Optional per-composition mutual exclusion for redeploys.
- Off by default; enabled with SERIALIZE_REDEPLOYS=true.
"""

import asyncio
from collections import defaultdict


class CompositionLocks:
    """One asyncio.Lock per composition name, created on first use."""

    def __init__(self):
        self._locks = defaultdict(asyncio.Lock)

    def for_name(self, name):
        return self._locks[name]

    def is_locked(self, name):
        return name in self._locks and self._locks[name].locked()
