from enum import IntEnum, Flag
from typing import Tuple

class TrackSubchannelType(IntEnum):
    None_ = 0
    Packed = 1
    Raw = 2
    PackedInterleaved = 3
    RawInterleaved = 4
    Q16 = 5
    Q16Interleaved = 6

class CdFlags(Flag):
    FourChannel = 0x08
    DataTrack = 0x04
    CopyPermitted = 0x02
    PreEmphasis = 0x01

# Red Book timing
SECTORS_PER_SECOND = 75
SECONDS_PER_MINUTE = 60

def lba_to_msf(sector: int) -> Tuple[int, int, int]:
    return (sector // SECTORS_PER_SECOND // SECONDS_PER_MINUTE,
            (sector // SECTORS_PER_SECOND) % SECONDS_PER_MINUTE,
            sector % SECTORS_PER_SECOND)

def split_adr_control(value: int) -> Tuple[int, CdFlags]:
    """Splits a Q subchannel ADR/control byte into (adr, control flags)."""
    return value & 0x0F, CdFlags((value & 0xF0) >> 4)

def enum_name(enum_class, value):
    try:
        return enum_class(value).name
    except ValueError:
        return f"Unknown_{value}"
