from __future__ import annotations

from dataclasses import dataclass

from sidepow.core.config import HASH_SIZE
from sidepow.core.serialization import bytes_from_hex


@dataclass(frozen=True)
class MainchainHeader:
    """The mainchain header fields the PoW verifier reads."""

    hash: bytes
    hash_prev_block: bytes
    time: int
    bits: int

    def hash_int(self) -> int:
        """Header hash as a big-endian unsigned integer."""
        return int.from_bytes(self.hash, "big")

    def to_dict(self) -> dict:
        return {
            "hash": self.hash.hex(),
            "hash_prev_block": self.hash_prev_block.hex(),
            "time": self.time,
            "bits": self.bits,
        }

    @classmethod
    def from_dict(cls, d: dict) -> MainchainHeader:
        return cls(
            hash=bytes_from_hex(d["hash"], HASH_SIZE, "hash"),
            hash_prev_block=bytes_from_hex(
                d["hash_prev_block"], HASH_SIZE, "hash_prev_block"
            ),
            time=d["time"],
            bits=d["bits"],
        )


@dataclass(frozen=True)
class MainchainBlockReference:
    """A full mainchain block observed by the sidechain; only its header matters here."""

    header: MainchainHeader

    def to_dict(self) -> dict:
        return {"header": self.header.to_dict()}

    @classmethod
    def from_dict(cls, d: dict) -> MainchainBlockReference:
        return cls(header=MainchainHeader.from_dict(d["header"]))


@dataclass(frozen=True)
class Ommer:
    """Mainchain claims of an orphaned sidechain block."""

    mainchain_references_headers: tuple[MainchainHeader, ...] = ()
    next_mainchain_headers: tuple[MainchainHeader, ...] = ()

    def to_dict(self) -> dict:
        return {
            "mainchain_references_headers": [
                h.to_dict() for h in self.mainchain_references_headers
            ],
            "next_mainchain_headers": [h.to_dict() for h in self.next_mainchain_headers],
        }

    @classmethod
    def from_dict(cls, d: dict) -> Ommer:
        return cls(
            mainchain_references_headers=tuple(
                MainchainHeader.from_dict(h)
                for h in d.get("mainchain_references_headers", [])
            ),
            next_mainchain_headers=tuple(
                MainchainHeader.from_dict(h) for h in d.get("next_mainchain_headers", [])
            ),
        )


@dataclass(frozen=True)
class SidechainBlock:
    """A sidechain block reduced to its mainchain claims and parent link."""

    id: bytes
    parent_id: bytes
    mainchain_block_references: tuple[MainchainBlockReference, ...] = ()
    next_mainchain_headers: tuple[MainchainHeader, ...] = ()
    ommers: tuple[Ommer, ...] = ()

    def active_mainchain_headers(self) -> list[MainchainHeader]:
        """Reference headers followed by the next-header knowledge proofs."""
        return [ref.header for ref in self.mainchain_block_references] + list(
            self.next_mainchain_headers
        )

    def ommer_mainchain_headers(self) -> list[MainchainHeader]:
        """All ommers' reference headers, then all their next headers, without repeats."""
        headers = [h for o in self.ommers for h in o.mainchain_references_headers]
        headers += [h for o in self.ommers for h in o.next_mainchain_headers]
        seen: set[bytes] = set()
        unique = []
        for h in headers:
            if h.hash not in seen:
                seen.add(h.hash)
                unique.append(h)
        return unique

    def to_dict(self) -> dict:
        return {
            "id": self.id.hex(),
            "parent_id": self.parent_id.hex(),
            "mainchain_block_references": [
                r.to_dict() for r in self.mainchain_block_references
            ],
            "next_mainchain_headers": [h.to_dict() for h in self.next_mainchain_headers],
            "ommers": [o.to_dict() for o in self.ommers],
        }

    @classmethod
    def from_dict(cls, d: dict) -> SidechainBlock:
        return cls(
            id=bytes.fromhex(d["id"]),
            parent_id=bytes.fromhex(d["parent_id"]),
            mainchain_block_references=tuple(
                MainchainBlockReference.from_dict(r)
                for r in d.get("mainchain_block_references", [])
            ),
            next_mainchain_headers=tuple(
                MainchainHeader.from_dict(h) for h in d.get("next_mainchain_headers", [])
            ),
            ommers=tuple(Ommer.from_dict(o) for o in d.get("ommers", [])),
        )
