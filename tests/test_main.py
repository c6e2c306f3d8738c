import json

from sidepow.__main__ import EXIT_CONFIG, EXIT_INVALID, EXIT_OK, main
from sidepow.core.compact import decode_compact_bits
from sidepow.core.header import MainchainHeader
from sidepow.core.powdata import serialize_pow_data
from tests.test_window import (
    SPACING,
    START_TIME,
    STEADY_BITS,
    make_params,
    sc_block,
    steady_pow_data,
)


def write_json(path, data):
    path.write_text(json.dumps(data))
    return str(path)


def small_hash(i):
    return (i + 1).to_bytes(32, "big")


def small_header(i, bits=STEADY_BITS, hash_value=None):
    """Mainchain header whose hash trivially meets any sane target."""
    return MainchainHeader(
        hash=hash_value or small_hash(i), hash_prev_block=small_hash(i - 1),
        time=START_TIME + SPACING * i, bits=bits,
    )


def steady_files(tmp_path, claimed):
    params = make_params(
        genesis_pow_data=steady_pow_data(28),
        genesis_mainchain_block_hash=small_hash(0),
    )
    history = [sc_block(i, [small_header(i)]).to_dict() for i in range(5)]
    block = sc_block(5, [claimed])
    return (
        write_json(tmp_path / "params.json", params.to_dict()),
        write_json(tmp_path / "history.json", history),
        write_json(tmp_path / "block.json", block.to_dict()),
    )


def header_with_hash(hash_value):
    return MainchainHeader(hash_value.to_bytes(32, "big"), bytes(32), 0, STEADY_BITS)


class TestPowDataCommand:
    def test_prints_oldest_first(self, capsys):
        samples = steady_pow_data(2)
        assert main(["pow-data", serialize_pow_data(samples)]) == EXIT_OK
        printed = json.loads(capsys.readouterr().out)
        assert printed == [s.to_dict() for s in samples]

    def test_malformed(self, capsys):
        assert main(["pow-data", "abc"]) == EXIT_CONFIG
        assert "error" in capsys.readouterr().err


class TestCheckHeaderCommand:
    def test_valid(self, tmp_path):
        config, _, _ = steady_files(tmp_path, small_header(5))
        header = write_json(tmp_path / "header.json", header_with_hash(1).to_dict())
        assert main(["check-header", header, "--config", config]) == EXIT_OK

    def test_insufficient_work(self, tmp_path):
        config, _, _ = steady_files(tmp_path, small_header(5))
        too_high = decode_compact_bits(STEADY_BITS) + 1
        header = write_json(tmp_path / "header.json", header_with_hash(too_high).to_dict())
        assert main(["check-header", header, "--config", config]) == EXIT_INVALID

    def test_missing_config(self, tmp_path):
        header = write_json(tmp_path / "header.json", header_with_hash(1).to_dict())
        missing = str(tmp_path / "nope.json")
        assert main(["check-header", header, "--config", missing]) == EXIT_CONFIG


class TestCheckBlockCommand:
    def run(self, tmp_path, claimed):
        config, history, block = steady_files(tmp_path, claimed)
        return main(["check-block", block, "--history", history, "--config", config])

    def test_valid(self, tmp_path):
        assert self.run(tmp_path, small_header(5)) == EXIT_OK

    def test_retarget_mismatch(self, tmp_path):
        assert self.run(tmp_path, small_header(5, bits=0x1f00ffff)) == EXIT_INVALID

    def test_header_without_work(self, tmp_path):
        claimed = small_header(5, hash_value=b"\xff" * 32)
        assert self.run(tmp_path, claimed) == EXIT_INVALID
