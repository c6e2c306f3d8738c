# Compact ("nBits") target encoding shared by the mainchain headers.

SIGN_BIT = 0x00800000


def decode_compact_bits(bits: int) -> int:
    """Expand a packed 32-bit compact value into its full target integer.

    The top byte is the size in bytes, the low three bytes the mantissa.
    The mantissa sign bit is not interpreted: callers that must reject
    negative encodings check it with is_negative_compact().
    """
    exponent = (bits >> 24) & 0xFF
    mantissa = bits & 0xFFFFFF
    if exponent <= 3:
        return mantissa >> (8 * (3 - exponent))
    return mantissa << (8 * (exponent - 3))


def encode_compact_bits(value: int) -> int:
    """Pack a non-negative target into compact form, keeping 24 bits of precision."""
    if value < 0:
        raise ValueError("compact encoding requires a non-negative value")
    size = (value.bit_length() + 7) // 8
    if size <= 3:
        mantissa = value << (8 * (3 - size))
    else:
        mantissa = value >> (8 * (size - 3))
    # a set top bit would read back as a negative target
    if mantissa & SIGN_BIT:
        mantissa >>= 8
        size += 1
    return (size << 24) | (mantissa & 0xFFFFFF)


def is_negative_compact(bits: int) -> bool:
    """True if the mantissa sign bit is set.

    A signed decoder reads such bits as a negative target, or as zero when
    the rest of the mantissa is empty; neither is a legal target.
    """
    return bool(bits & SIGN_BIT)
