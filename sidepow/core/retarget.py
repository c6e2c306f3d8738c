from __future__ import annotations

import statistics
from typing import Sequence

from sidepow.core.compact import encode_compact_bits
from sidepow.core.config import NetworkParams


def median_time_past(times: Sequence[int], end: int, span: int) -> int:
    """Median of times[end - span:end]; the upper middle element for even spans."""
    if span <= 0:
        raise ValueError("median span must be positive")
    if end < span or end > len(times):
        raise ValueError(f"cannot take {span} times ending at {end} of {len(times)}")
    return statistics.median_high(times[end - span:end])


def _div_toward_zero(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def calculate_next_work_required(
    avg_target: int, first_time: int, last_time: int, params: NetworkParams
) -> int:
    """Compact bits required of the next block given the averaged target.

    first_time and last_time are medians rather than raw block times, and
    the observed timespan is damped to a quarter of its deviation before
    clamping; both limit time-warp attacks.
    """
    expected_timespan = params.averaging_window_timespan
    actual_timespan = last_time - first_time
    actual_timespan = expected_timespan + _div_toward_zero(
        actual_timespan - expected_timespan, 4
    )
    actual_timespan = max(
        params.min_actual_timespan, min(params.max_actual_timespan, actual_timespan)
    )

    # Unbounded ints keep precision a 256-bit reference drops at this division;
    # the bits tolerance in the verifier absorbs the difference.
    new_target = avg_target * actual_timespan // expected_timespan
    new_target = min(new_target, params.pow_limit)
    return encode_compact_bits(new_target)
