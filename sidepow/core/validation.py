from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from sidepow.core.compact import decode_compact_bits, is_negative_compact
from sidepow.core.config import NetworkParams
from sidepow.core.errors import (
    InsufficientProofError,
    MalformedTargetError,
    RetargetMismatchError,
    ValidationError,
)
from sidepow.core.header import MainchainHeader, SidechainBlock
from sidepow.core.retarget import calculate_next_work_required, median_time_past
from sidepow.core.window import TimeBitsWindow, build_window

if TYPE_CHECKING:
    from sidepow.core.history import HistoryStore

logger = logging.getLogger(__name__)


# -- Single header --


def verify_proof_of_work(header: MainchainHeader, params: NetworkParams) -> None:
    """Check a header against its own claimed target. Raises ValidationError."""
    target = decode_compact_bits(header.bits)
    if target <= 0 or is_negative_compact(header.bits):
        raise MalformedTargetError(f"illegal target bits {header.bits:#010x}")
    if target > params.pow_limit:
        raise MalformedTargetError(
            f"target bits {header.bits:#010x} above network pow limit"
        )
    if header.hash_int() > target:
        raise InsufficientProofError(
            f"header {header.hash.hex()[:16]} hash exceeds target {header.bits:#010x}"
        )


def check_proof_of_work(header: MainchainHeader, params: NetworkParams) -> bool:
    """True if the header satisfies its claimed target and the pow limit."""
    try:
        verify_proof_of_work(header, params)
    except ValidationError as e:
        logger.warning(f"rejected mainchain header: {e}")
        return False
    return True


# -- Difficulty retarget --


def verify_headers_next_work_required(
    headers: Sequence[MainchainHeader],
    window: TimeBitsWindow,
    params: NetworkParams,
) -> TimeBitsWindow:
    """Replay the retarget over headers in order, returning the advanced window.

    Each header's bits must be within params.bits_tolerance compact units of
    the value computed from the window preceding it. The tolerance compares
    packed encodings, so one unit means more or less target depending on the
    exponent byte.
    """
    n = params.pow_averaging_window
    m = params.median_time_span
    for header in headers:
        times = window.times()
        expected = calculate_next_work_required(
            window.average_target(),
            median_time_past(times, len(times) - n, m),
            median_time_past(times, len(times), m),
            params,
        )
        if abs(expected - header.bits) > params.bits_tolerance:
            raise RetargetMismatchError(
                f"header {header.hash.hex()[:16]} bits {header.bits:#010x}, "
                f"expected {expected:#010x}"
            )
        window = window.slide(header.time, header.bits)
    return window


def verify_next_work_required(
    block: SidechainBlock, history: HistoryStore, params: NetworkParams
) -> None:
    """Check the bits of every mainchain header claimed by block. Raises ValidationError.

    Ommer headers share the block's mainchain ancestry point, so they are
    replayed over the same starting window as the active claims.
    """
    active_headers = block.active_mainchain_headers()
    if not active_headers:
        return

    window = build_window(block, active_headers[0], history, params)
    verify_headers_next_work_required(active_headers, window, params)

    ommer_headers = block.ommer_mainchain_headers()
    if ommer_headers:
        verify_headers_next_work_required(ommer_headers, window, params)


def check_next_work_required(
    block: SidechainBlock, history: HistoryStore, params: NetworkParams
) -> bool:
    """True if all of block's mainchain claims carry the required bits."""
    try:
        verify_next_work_required(block, history, params)
    except ValidationError as e:
        logger.warning(f"rejected sidechain block {block.id.hex()[:16]}: {e}")
        return False
    return True
