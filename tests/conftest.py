import random
from typing import Iterable

import pytest


def _encode_short(records: Iterable[bytes]) -> bytes:
    """Short-record writer used only to build test files."""
    out = bytearray([0x4B])
    for data in records:
        pos = 0
        while len(data) - pos >= 128:
            out += bytes([0x81]) + data[pos:pos + 128] + bytes([0x81])
            pos += 128
        rest = data[pos:]
        out += bytes([len(rest)]) + rest + bytes([len(rest)])
    out.append(0x82)
    return bytes(out)


def _encode_long(records: Iterable[bytes], byteorder: str = "little") -> bytes:
    """Long-record writer used only to build test files."""
    out = bytearray()
    for data in records:
        marker = len(data).to_bytes(4, byteorder=byteorder, signed=True)
        out += marker + data + marker
    return bytes(out)


@pytest.fixture
def encode_short():
    return _encode_short


@pytest.fixture
def encode_long():
    return _encode_long


@pytest.fixture
def make_payloads():
    def _make(count: int, size: int, seed: int = 1234):
        rng = random.Random(seed)
        return [bytes(rng.getrandbits(8) for _ in range(size)) for _ in range(count)]
    return _make
