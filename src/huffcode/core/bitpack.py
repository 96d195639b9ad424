from __future__ import annotations

from huffcode.errors import MalformedStream


def check_bits(bits: str) -> None:
    for i, ch in enumerate(bits):
        if ch != "0" and ch != "1":
            raise MalformedStream(f"invalid bit {ch!r} at offset {i} (expected '0' or '1')")


def pack_bits(bits: str) -> tuple[bytes, int]:
    """
    bits ('0'/'1' string) -> (bytes MSB-first, lastbits)
    lastbits = number of valid bits in the last byte (1..8), or 0 if bits is empty.
    """
    if not bits:
        return b"", 0

    out_bytes = bytearray()
    current_byte = 0
    bit_count = 0

    for i, ch in enumerate(bits):
        if ch == "1":
            current_byte = (current_byte << 1) | 1
        elif ch == "0":
            current_byte <<= 1
        else:
            raise MalformedStream(f"invalid bit {ch!r} at offset {i} (expected '0' or '1')")
        bit_count += 1
        if bit_count == 8:
            out_bytes.append(current_byte)
            current_byte = 0
            bit_count = 0

    if bit_count > 0:
        current_byte <<= (8 - bit_count)
        out_bytes.append(current_byte)
        lastbits = bit_count
    else:
        lastbits = 8  # every byte is full

    return bytes(out_bytes), lastbits


def unpack_bits(data: bytes, lastbits: int) -> str:
    """Inverse of pack_bits: keep only ``lastbits`` bits of the final byte."""
    if not data:
        if lastbits != 0:
            raise MalformedStream(f"lastbits={lastbits} but the bitstream is empty")
        return ""
    if not 1 <= lastbits <= 8:
        raise MalformedStream(f"lastbits must be in 1..8 for a non-empty bitstream, got {lastbits}")

    bits = "".join(format(b, "08b") for b in data)
    return bits[: len(bits) - (8 - lastbits)]
