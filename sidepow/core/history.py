from __future__ import annotations

from typing import Iterable, Protocol

from sidepow.core.header import SidechainBlock


class HistoryStore(Protocol):
    """Read access to previously accepted sidechain blocks."""

    def block_by_id(self, block_id: bytes) -> SidechainBlock | None:
        ...


class InMemoryHistoryStore:
    """Sidechain blocks indexed by id, held in a dict."""

    def __init__(self):
        self.blocks: dict[bytes, SidechainBlock] = {}

    @classmethod
    def from_blocks(cls, blocks: Iterable[SidechainBlock]) -> InMemoryHistoryStore:
        store = cls()
        for block in blocks:
            store.add_block(block)
        return store

    def add_block(self, block: SidechainBlock) -> None:
        self.blocks[block.id] = block

    def block_by_id(self, block_id: bytes) -> SidechainBlock | None:
        return self.blocks.get(block_id)

    def __len__(self) -> int:
        return len(self.blocks)

    def __contains__(self, block_id: bytes) -> bool:
        return block_id in self.blocks
