import pytest

from sidepow.core.serialization import bytes_from_hex, canonicalize


class TestCanonicalize:
    def test_sorted_keys(self):
        assert canonicalize({"b": 2, "a": 1}) == '{"a":1,"b":2}'

    def test_no_whitespace(self):
        result = canonicalize([{"key": "value", "num": 42}])
        assert " " not in result

    def test_bytes_auto_convert(self):
        assert canonicalize({"hash": b"\x00\x01\x02"}) == '{"hash":"000102"}'

    def test_unsupported_type(self):
        with pytest.raises(TypeError, match="Not JSON serializable"):
            canonicalize({"x": object()})


class TestBytesFromHex:
    def test_exact_size(self):
        assert bytes_from_hex("00ff", 2, "field") == b"\x00\xff"

    def test_wrong_size(self):
        with pytest.raises(ValueError, match="field must be 4 bytes, got 2"):
            bytes_from_hex("00ff", 4, "field")

    def test_invalid_hex(self):
        with pytest.raises(ValueError):
            bytes_from_hex("xyz", 2, "field")
