from .snapshot import BulkImport, Snapshot, Standard, build_snapshot
from .genesis_file import load_genesis, write_genesis

__all__ = [
    "BulkImport",
    "Snapshot",
    "Standard",
    "build_snapshot",
    "load_genesis",
    "write_genesis",
]
