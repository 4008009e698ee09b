"""
registry.py
- Read-only mapping from composition name to its ManagedComposition.
- Built once at config load and shared, unlocked, by the API and the runners.
"""

from collections.abc import Mapping
from types import MappingProxyType

from conductor.core.errors import CompositionNotFound


class CompositionRegistry(Mapping):
    def __init__(self, compositions=None):
        self._compositions = MappingProxyType(dict(compositions or {}))

    def lookup(self, name):
        """
        Resolve a composition by name.

        Raises:
            CompositionNotFound: if the name was never registered.
        """
        try:
            return self._compositions[name]
        except KeyError:
            raise CompositionNotFound(name) from None

    def names(self):
        return list(self._compositions)

    def __getitem__(self, name):
        return self._compositions[name]

    def __iter__(self):
        return iter(self._compositions)

    def __len__(self):
        return len(self._compositions)

    def __repr__(self):
        return f"CompositionRegistry({self.names()!r})"
