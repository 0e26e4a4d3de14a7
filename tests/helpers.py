from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

TEST_PRIVATE_KEY = "0x" + "11" * 32
RECIPIENT = "0x1234567890123456789012345678901234567890"
CONTRACT = "0x00000000000000000000000000000000000000a1"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def raw_public_key(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """64 byte x|y encoding, as returned by the Functions coordinator."""
    point = private_key.public_key().public_bytes(Encoding.X962, PublicFormat.UncompressedPoint)
    return point[1:]


def raw_private_key(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    return private_key.private_numbers().private_value.to_bytes(32, "big")
