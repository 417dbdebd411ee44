"""Named content blocks shared across renders."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from viewrender.exceptions import BlockNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping


class BlockStore:
    """Mapping of block ID to captured content.

    Blocks are independent of render nesting: a block set while rendering a
    partial stays visible to the parent view and to later renders until it is
    removed.
    """

    __slots__: Final = ("_blocks",)

    _blocks: dict[str, str]

    def __init__(self, blocks: Mapping[str, str] | None = None) -> None:
        self._blocks = dict(blocks) if blocks else {}

    def set(self, block_id: str, content: str) -> None:
        """Insert or overwrite a block."""
        self._blocks[block_id] = content

    def get(self, block_id: str) -> str:
        """Return a block's content.

        Raises:
            BlockNotFoundError: If the block was never set or has been removed.
        """
        try:
            return self._blocks[block_id]
        except KeyError:
            raise BlockNotFoundError(block_id) from None

    def has(self, block_id: str) -> bool:
        """Check whether a block is set."""
        return block_id in self._blocks

    def remove(self, block_id: str) -> None:
        """Delete a block.

        Raises:
            BlockNotFoundError: If the block is not set.
        """
        if block_id not in self._blocks:
            raise BlockNotFoundError(block_id)
        del self._blocks[block_id]

    def clear(self) -> None:
        """Remove all blocks."""
        self._blocks.clear()

    def __contains__(self, block_id: object) -> bool:
        return block_id in self._blocks

    def __iter__(self) -> Iterator[str]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)
