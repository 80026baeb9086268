from enum import Enum, IntEnum


class FormatMode(Enum):
    """Physical encoding of a Fortran unformatted sequential file"""
    SHORT_RECORD = "short"
    LONG_RECORD = "long"


class ShortMarker(IntEnum):
    """Marker bytes of the short-record encoding"""

    BOF = 0x4B  # File begin marker
    EOF = 0x82  # File end marker
    MAX_LENGTH = 0x80  # Largest fragment payload (128 bytes)
    CONTINUATION = 0x81  # 128-byte fragment, logical record goes on
    # Length bytes above CONTINUATION are invalid


class DecodeStatus(Enum):
    """Outcome of a short-record decode attempt"""
    COMPLETED = "completed"
    FALLBACK_REQUESTED = "fallback_requested"
