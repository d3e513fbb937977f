from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from nrgrip.CD.cd_types import CdFlags, TrackSubchannelType, split_adr_control
from .constants import *

class ChunkTag(Enum):
    CUEX = CHUNK_CUEX
    DAOX = CHUNK_DAOX
    SINF = CHUNK_SINF
    MTYP = CHUNK_MTYP
    AFNM = CHUNK_AFNM
    CDTX = CHUNK_CDTX
    ETN2 = CHUNK_ETN2
    ETNF = CHUNK_ETNF
    DINF = CHUNK_DINF
    TOCT = CHUNK_TOCT
    RELO = CHUNK_RELO
    END = CHUNK_END_ID
    UNKNOWN = b""

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN

@dataclass(frozen=True)
class NrgFooter:
    version: int
    chain_offset: int
    file_size: int

@dataclass(frozen=True)
class Chunk:
    tag: bytes
    length: int
    offset: int
    header_offset: int

    @property
    def kind(self) -> ChunkTag:
        return ChunkTag(self.tag)

    @property
    def name(self) -> str:
        return self.tag.decode('latin-1')

    @property
    def end(self) -> int:
        return self.offset + self.length

    def read_payload(self, source) -> bytes:
        return source.read_exact(self.offset, self.length)

# Decoded chunks

@dataclass(frozen=True)
class NrgCuexEntry:
    mode: int = 0
    track_number: int = 0
    index_number: int = 0
    padding: int = 0
    position_sectors: int = 0

    @property
    def adr(self) -> int:
        return split_adr_control(self.mode)[0]

    @property
    def control(self) -> CdFlags:
        return split_adr_control(self.mode)[1]

    @property
    def is_lead_in(self) -> bool:
        return self.track_number == CUEX_LEAD_IN

    @property
    def is_lead_out(self) -> bool:
        return self.track_number == CUEX_LEAD_OUT

@dataclass(frozen=True)
class NrgCuex:
    entries: Tuple[NrgCuexEntry, ...] = ()

@dataclass(frozen=True)
class NrgDaoxTrack:
    sector_size: int = 0
    data_mode: int = 0
    unknown: int = DAOX_TRACK_UNKNOWN_DEFAULT
    index0: int = 0
    index1: int = 0
    track_end: int = 0

@dataclass(frozen=True)
class NrgDaox:
    size2: int = 0
    upc: str = ""
    padding: int = 0
    toc_type: int = 0
    first_track: int = 0
    last_track: int = 0
    tracks: Tuple[NrgDaoxTrack, ...] = ()

@dataclass(frozen=True)
class NrgSinf:
    track_count: int = 0

@dataclass(frozen=True)
class NrgMtyp:
    media_type: int = 0

@dataclass(frozen=True)
class NrgAfnm:
    names: Tuple[str, ...] = ()

@dataclass(frozen=True)
class Opaque:
    """A chunk kept only for listing: unknown, undecoded or rejected by its decoder."""
    tag: bytes
    length: int
    offset: int

    @property
    def name(self) -> str:
        return self.tag.decode('latin-1')

# Image model

@dataclass(frozen=True)
class IndexPoint:
    number: int
    offset: int

@dataclass(frozen=True)
class Track:
    number: int
    sector_size: int
    start_offset: int
    sectors: int
    indexes: Tuple[IndexPoint, ...]
    start_sector: int = 0
    data_mode: int = 0
    subchannel_type: TrackSubchannelType = TrackSubchannelType.None_
    copy_permitted: bool = False
    pre_emphasis: bool = False
    title: Optional[str] = None

    @property
    def end_offset(self) -> int:
        return self.start_offset + self.sectors * self.sector_size

    @property
    def has_subchannel(self) -> bool:
        return self.sector_size == AUDIO_SUBCHANNEL_SECTOR_SIZE

    @property
    def pregap(self) -> int:
        return next(index.offset for index in self.indexes if index.number == 1)

    def sector_offset(self, sector: int) -> int:
        return self.start_offset + sector * self.sector_size

@dataclass(frozen=True)
class Session:
    number: int
    tracks: Tuple[Track, ...]

    @property
    def first_track(self) -> int:
        return self.tracks[0].number

    @property
    def last_track(self) -> int:
        return self.tracks[-1].number

@dataclass(frozen=True)
class NrgImage:
    version: int
    file_size: int = field(compare=False)
    chain_offset: int
    chunks: Tuple[Chunk, ...] = field(compare=False)
    sessions: Tuple[Session, ...]
    daox: Optional[NrgDaox] = None
    cuex: Optional[NrgCuex] = None
    sinf: Optional[NrgSinf] = None
    mtyp: Optional[NrgMtyp] = None
    afnm: Optional[NrgAfnm] = None
    opaque: Tuple[Opaque, ...] = field(default=(), compare=False)

    @property
    def tracks(self) -> List[Track]:
        return [track for session in self.sessions for track in session.tracks]

    @property
    def data_extent(self) -> int:
        return self.chain_offset

    @property
    def total_sectors(self) -> int:
        return sum(track.sectors for track in self.tracks)

    @property
    def skipped_chunks(self) -> List[str]:
        return [chunk.name for chunk in self.opaque]
