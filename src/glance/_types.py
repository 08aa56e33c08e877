"""Shared type definitions for glance."""

from pathlib import Path
from typing import Literal, TypeAlias

# Path to the markdown source file
SourcePath: TypeAlias = Path

# Snapshot version counter (0 = nothing committed yet)
Version: TypeAlias = int

# Hex digest of the raw source bytes
ContentHash: TypeAlias = str

# Filesystem change reported by the watcher
ChangeKind: TypeAlias = Literal["created", "modified", "deleted"]
