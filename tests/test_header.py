import hashlib

import pytest

from sidepow.core.header import MainchainBlockReference, MainchainHeader, Ommer, SidechainBlock
from tests.test_window import mc_header, sc_block


def alt(i):
    return MainchainHeader(
        hash=hashlib.sha256(f"alt{i}".encode()).digest(),
        hash_prev_block=mc_header(i).hash_prev_block,
        time=1_500_000_000 + i,
        bits=0x1f07ffff,
    )


class TestMainchainHeader:
    def test_hash_int_big_endian(self):
        header = MainchainHeader(b"\x00" * 31 + b"\x05", bytes(32), 0, 0)
        assert header.hash_int() == 5

    def test_roundtrip(self):
        header = mc_header(3)
        assert MainchainHeader.from_dict(header.to_dict()) == header

    def test_bad_hash_length(self):
        d = mc_header(3).to_dict()
        d["hash"] = "00ff"
        with pytest.raises(ValueError, match="32 bytes"):
            MainchainHeader.from_dict(d)


class TestSidechainBlock:
    def test_active_headers_order(self):
        block = sc_block(2, [mc_header(4), mc_header(5)], next_headers=[mc_header(6)])
        assert block.active_mainchain_headers() == [mc_header(4), mc_header(5), mc_header(6)]

    def test_ommer_headers_references_first(self):
        o1 = Ommer((alt(1),), (alt(2),))
        o2 = Ommer((alt(3),), (alt(4),))
        block = sc_block(2, ommers=[o1, o2])
        assert block.ommer_mainchain_headers() == [alt(1), alt(3), alt(2), alt(4)]

    def test_ommer_headers_deduplicated(self):
        o = Ommer((alt(1), alt(2)), (alt(3),))
        block = sc_block(2, ommers=[o, o, Ommer((alt(2),))])
        assert block.ommer_mainchain_headers() == [alt(1), alt(2), alt(3)]

    def test_roundtrip(self):
        block = sc_block(
            7, [mc_header(1)], next_headers=[mc_header(2)],
            ommers=[Ommer((alt(1),), (alt(2),))],
        )
        restored = SidechainBlock.from_dict(block.to_dict())
        assert restored == block
        assert isinstance(restored.mainchain_block_references[0], MainchainBlockReference)
