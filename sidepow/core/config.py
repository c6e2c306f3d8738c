# Consensus parameters for verifying mainchain proof of work on the sidechain
from __future__ import annotations

from dataclasses import dataclass, field

from sidepow.core.powdata import TimeBits, parse_pow_data, serialize_pow_data

# Block timing
POW_TARGET_SPACING = 150
POW_AVERAGING_WINDOW = 17
MEDIAN_TIME_SPAN = 11

# Retarget damping, percent of the averaging window timespan
POW_MAX_ADJUST_DOWN = 32
POW_MAX_ADJUST_UP = 16

# Claimed bits may differ from the computed value by this many compact units
BITS_TOLERANCE = 1

# PoW target ceilings
MAINNET_POW_LIMIT = int("0007" + "f" * 60, 16)
TESTNET_POW_LIMIT = int("07" + "f" * 62, 16)
REGTEST_POW_LIMIT = int("0f" * 32, 16)

HASH_SIZE = 32

NETWORKS = {
    "mainnet": (MAINNET_POW_LIMIT, POW_MAX_ADJUST_DOWN, POW_MAX_ADJUST_UP),
    "testnet": (TESTNET_POW_LIMIT, POW_MAX_ADJUST_DOWN, POW_MAX_ADJUST_UP),
    "regtest": (REGTEST_POW_LIMIT, 0, 0),
}


@dataclass(frozen=True)
class NetworkParams:
    """Read-only network parameters consumed by the PoW verifier."""

    pow_averaging_window: int
    median_time_span: int
    pow_limit: int
    averaging_window_timespan: int
    min_actual_timespan: int
    max_actual_timespan: int
    genesis_mainchain_block_hash: bytes
    genesis_pow_data: tuple[TimeBits, ...] = field(default_factory=tuple)
    bits_tolerance: int = BITS_TOLERANCE

    def __post_init__(self):
        if self.pow_averaging_window <= 0:
            raise ValueError("pow_averaging_window must be positive")
        if self.median_time_span <= 0 or self.median_time_span % 2 == 0:
            raise ValueError("median_time_span must be a positive odd number")
        if self.pow_limit <= 0:
            raise ValueError("pow_limit must be positive")
        if self.averaging_window_timespan <= 0:
            raise ValueError("averaging_window_timespan must be positive")
        if self.min_actual_timespan <= 0:
            raise ValueError("min_actual_timespan must be positive")
        if self.min_actual_timespan > self.max_actual_timespan:
            raise ValueError("min_actual_timespan exceeds max_actual_timespan")
        if len(self.genesis_mainchain_block_hash) != HASH_SIZE:
            raise ValueError(f"genesis mainchain block hash must be {HASH_SIZE} bytes")
        # accept any iterable of samples but store an immutable tuple
        object.__setattr__(self, "genesis_pow_data", tuple(self.genesis_pow_data))

    @property
    def window_size(self) -> int:
        """Samples needed before the next work can be computed."""
        return self.pow_averaging_window + self.median_time_span

    def to_dict(self) -> dict:
        return {
            "pow_averaging_window": self.pow_averaging_window,
            "median_time_span": self.median_time_span,
            "pow_limit": f"{self.pow_limit:064x}",
            "averaging_window_timespan": self.averaging_window_timespan,
            "min_actual_timespan": self.min_actual_timespan,
            "max_actual_timespan": self.max_actual_timespan,
            "genesis_mainchain_block_hash": self.genesis_mainchain_block_hash.hex(),
            "genesis_pow_data": serialize_pow_data(list(self.genesis_pow_data)),
            "bits_tolerance": self.bits_tolerance,
        }

    @classmethod
    def from_dict(cls, d: dict) -> NetworkParams:
        """Build params from a config dict, either a preset or explicit values."""
        if "network" in d:
            return network_params(
                d["network"],
                bytes.fromhex(d["genesis_mainchain_block_hash"]),
                d.get("genesis_pow_data", ""),
            )
        return cls(
            pow_averaging_window=d["pow_averaging_window"],
            median_time_span=d["median_time_span"],
            pow_limit=int(d["pow_limit"], 16),
            averaging_window_timespan=d["averaging_window_timespan"],
            min_actual_timespan=d["min_actual_timespan"],
            max_actual_timespan=d["max_actual_timespan"],
            genesis_mainchain_block_hash=bytes.fromhex(d["genesis_mainchain_block_hash"]),
            genesis_pow_data=parse_pow_data(d.get("genesis_pow_data", "")),
            bits_tolerance=d.get("bits_tolerance", BITS_TOLERANCE),
        )


def network_params(
    network: str,
    genesis_mainchain_block_hash: bytes,
    genesis_pow_data: str = "",
) -> NetworkParams:
    """Params for a named network, seeded with the sidechain's genesis info."""
    if network not in NETWORKS:
        raise ValueError(f"unknown network: {network}")
    pow_limit, adjust_down, adjust_up = NETWORKS[network]
    timespan = POW_AVERAGING_WINDOW * POW_TARGET_SPACING
    return NetworkParams(
        pow_averaging_window=POW_AVERAGING_WINDOW,
        median_time_span=MEDIAN_TIME_SPAN,
        pow_limit=pow_limit,
        averaging_window_timespan=timespan,
        min_actual_timespan=timespan * (100 - adjust_up) // 100,
        max_actual_timespan=timespan * (100 + adjust_down) // 100,
        genesis_mainchain_block_hash=genesis_mainchain_block_hash,
        genesis_pow_data=parse_pow_data(genesis_pow_data),
    )
