"""Byte to character position mapping for error reports on UTF-8 input."""

from __future__ import annotations

from typing import Final

from jtree._codec import is_continuation_byte


class UTF8PositionMapper:
    """Maps byte offsets in a UTF-8 buffer to character offsets.

    The parser works on bytes while JSONDecodeError reports character
    positions. Rather than mapping every byte, the mapper stores the
    character offset at fixed byte intervals and counts forward from the
    nearest checkpoint.
    """

    def __init__(self, data: bytes, checkpoint_interval: int = 256) -> None:
        """Initialize position mapper with checkpoint system.

        Args:
            data: The UTF-8 buffer positions refer to
            checkpoint_interval: Bytes between checkpoints (default 256)
        """
        self.data: Final = data
        self.checkpoint_interval: Final = checkpoint_interval
        # checkpoints[k] is the character offset of byte k * interval
        self.checkpoints: list[int] = []
        self._is_ascii_only: bool = data.isascii()

        if not self._is_ascii_only:
            self._build_checkpoints()

    @staticmethod
    def _count_chars(chunk: bytes) -> int:
        return sum(1 for byte in chunk if not is_continuation_byte(byte))

    def _build_checkpoints(self) -> None:
        """Record the character offset at the start of every interval."""
        char_pos = 0
        for start in range(0, len(self.data), self.checkpoint_interval):
            self.checkpoints.append(char_pos)
            chunk = self.data[start : start + self.checkpoint_interval]
            char_pos += self._count_chars(chunk)

    def byte_to_char(self, byte_pos: int) -> int:
        """Convert byte position to character position.

        Args:
            byte_pos: Offset into the UTF-8 buffer

        Returns:
            Character offset of the character containing that byte
        """
        if self._is_ascii_only:
            return byte_pos

        byte_pos = max(0, min(byte_pos, len(self.data)))
        index = min(
            byte_pos // self.checkpoint_interval, len(self.checkpoints) - 1
        )
        start = index * self.checkpoint_interval
        return self.checkpoints[index] + self._count_chars(
            self.data[start:byte_pos]
        )
