"""Trailing (time, bits) history ahead of a sidechain block's mainchain claims."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import islice
from typing import TYPE_CHECKING, Iterable, Iterator

from sidepow.core.compact import decode_compact_bits
from sidepow.core.config import NetworkParams
from sidepow.core.errors import ChainDiscontinuityError, IncompleteHistoryError
from sidepow.core.header import MainchainHeader, SidechainBlock
from sidepow.core.powdata import TimeBits

if TYPE_CHECKING:
    from sidepow.core.history import HistoryStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeBitsWindow:
    """Oldest-first samples plus the target sum of the newest averaging_window of them."""

    samples: tuple[TimeBits, ...]
    averaging_window: int
    target_sum: int

    @classmethod
    def from_samples(
        cls, samples: Iterable[TimeBits], averaging_window: int
    ) -> TimeBitsWindow:
        samples = tuple(samples)
        if len(samples) < averaging_window:
            raise ValueError(
                f"window of {len(samples)} samples is shorter than "
                f"averaging window {averaging_window}"
            )
        target_sum = sum(
            decode_compact_bits(s.bits) for s in samples[len(samples) - averaging_window:]
        )
        return cls(samples, averaging_window, target_sum)

    def __len__(self) -> int:
        return len(self.samples)

    def times(self) -> list[int]:
        return [s.time for s in self.samples]

    def average_target(self) -> int:
        return self.target_sum // self.averaging_window

    def slide(self, time: int, bits: int) -> TimeBitsWindow:
        """Window with the oldest sample dropped and (time, bits) appended."""
        leaving = self.samples[len(self.samples) - self.averaging_window]
        target_sum = (
            self.target_sum
            - decode_compact_bits(leaving.bits)
            + decode_compact_bits(bits)
        )
        samples = self.samples[1:] + (TimeBits(time, bits),)
        return TimeBitsWindow(samples, self.averaging_window, target_sum)


def _ancestor_samples(
    block: SidechainBlock,
    first_header: MainchainHeader,
    history: HistoryStore,
    params: NetworkParams,
) -> Iterator[TimeBits]:
    """Yield samples preceding first_header, newest first.

    Consumers stop pulling once they have enough, so ancestors beyond the
    window are never fetched or checked.
    """
    cursor = first_header
    current = block
    while True:
        if cursor.hash == params.genesis_mainchain_block_hash:
            logger.debug("reached genesis mainchain block, using genesis pow data")
            yield from reversed(params.genesis_pow_data)
            return

        parent = history.block_by_id(current.parent_id)
        if parent is None:
            raise IncompleteHistoryError(
                f"sidechain block {current.parent_id.hex()[:16]} not found in history"
            )
        current = parent

        for ref in reversed(current.mainchain_block_references):
            if ref.header.hash != cursor.hash_prev_block:
                raise ChainDiscontinuityError(
                    f"mainchain header {ref.header.hash.hex()[:16]} in sidechain block "
                    f"{current.id.hex()[:16]} is not the parent of "
                    f"{cursor.hash.hex()[:16]}"
                )
            yield TimeBits(ref.header.time, ref.header.bits)
            cursor = ref.header


def build_window(
    block: SidechainBlock,
    first_header: MainchainHeader,
    history: HistoryStore,
    params: NetworkParams,
) -> TimeBitsWindow:
    """Collect the window_size samples that immediately precede first_header."""
    needed = params.window_size
    newest_first = list(
        islice(_ancestor_samples(block, first_header, history, params), needed)
    )
    if len(newest_first) != needed:
        raise IncompleteHistoryError(
            f"only {len(newest_first)} of {needed} samples available before "
            f"{first_header.hash.hex()[:16]}"
        )
    logger.debug(f"built pow window of {needed} samples for block {block.id.hex()[:16]}")
    return TimeBitsWindow.from_samples(reversed(newest_first), params.pow_averaging_window)
