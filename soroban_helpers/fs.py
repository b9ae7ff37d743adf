"""Reading contract bytecode from disk."""

from pathlib import Path

from .errors import FileReadError


def read_wasm(path: str | Path) -> bytes:
    """Return the bytes of a compiled contract (.wasm) file."""
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise FileReadError(f"Failed to read contract file {path}: {e}", path=str(path)) from e
