"""Fixed-capacity byte buffer that yields newline-terminated lines."""

from __future__ import annotations

import logging

MAX_MSG_LEN = 100

log = logging.getLogger(__name__)


class LineBuffer:
    """Accumulates incoming bytes up to a fixed capacity and splits off lines."""

    def __init__(self, capacity: int = MAX_MSG_LEN) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    @property
    def data(self) -> bytes:
        """The bytes currently held."""
        return bytes(self._data)

    def append(self, data: bytes) -> int:
        """Store as much of ``data`` as fits; return the number of bytes dropped."""
        room = self.capacity - len(self._data)
        taken = data[:room]
        log.debug(
            "append: size=%d, len=%d, to_copy=%d", len(self._data), len(data), len(taken)
        )
        self._data += taken
        return len(data) - len(taken)

    def newline_index(self) -> int | None:
        """Index of the first newline, or None when no full line is buffered."""
        index = self._data.find(b"\n")
        return None if index < 0 else index

    def pop_line(self) -> bytes | None:
        """Remove and return the first line, newline included, or None if none is ready."""
        index = self.newline_index()
        if index is None:
            return None
        line = bytes(self._data[: index + 1])
        del self._data[: index + 1]
        return line

    def is_full(self) -> bool:
        return len(self._data) >= self.capacity

    def clear(self) -> None:
        self._data.clear()

    def debug(self) -> str:
        """Describe the buffer contents byte by byte."""
        lines = [f"buffer->size: {len(self._data)}"]
        for position, byte in enumerate(self._data):
            shown = chr(byte) if 32 <= byte <= 126 else "."
            lines.append(f"{position:02d}: char='{shown}' hex=0x{byte:02x}")
        return "\n".join(lines) + "\n"