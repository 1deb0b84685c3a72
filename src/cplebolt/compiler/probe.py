"""
Directory snapshots used by the compiler debug command to spot which files a
compile produced.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List


@dataclass
class DirEntry:
    name: str
    is_dir: bool
    size: int

    @property
    def kind(self) -> str:
        return "[DIR]" if self.is_dir else "[FILE]"

    @property
    def size_kb(self) -> str:
        return f"{self.size / 1024:.2f}"


def snapshot_directory(directory: str) -> Dict[str, DirEntry]:
    """Name -> entry for everything directly inside `directory`, sorted by name."""
    entries = {}
    for child in sorted(Path(directory).iterdir(), key=lambda p: p.name):
        try:
            stat = child.stat()
        except FileNotFoundError:
            # Removed between listing and stat
            continue
        entries[child.name] = DirEntry(name=child.name, is_dir=child.is_dir(), size=stat.st_size)
    return entries


def new_entries(before: Dict[str, DirEntry], after: Dict[str, DirEntry]) -> List[DirEntry]:
    return [entry for name, entry in after.items() if name not in before]
