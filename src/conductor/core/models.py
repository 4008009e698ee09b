"""
models.py
- Immutable configuration values shared by every component for the process lifetime.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from conductor.core.constants import DEFAULT_PORT
from conductor.core.registry import CompositionRegistry


@dataclass(frozen=True)
class ManagedComposition:
    work_directory: Path


@dataclass(frozen=True)
class Config:
    token: str = field(repr=False)
    compositions: CompositionRegistry
    port: int = DEFAULT_PORT
    force_update_interval: Optional[int] = None
    prune_interval: Optional[int] = None
