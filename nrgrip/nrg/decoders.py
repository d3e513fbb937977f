import struct
import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Callable, Mapping

from nrgrip.errors import MalformedChunk
from .constants import *
from .structs import (
    ChunkTag, Chunk, Opaque, NrgCuex, NrgCuexEntry, NrgDaox, NrgDaoxTrack,
    NrgSinf, NrgMtyp, NrgAfnm
)
from .utilities import from_bcd, read_sized_string

logger = logging.getLogger(__name__)

DAOX_HEADER = struct.Struct('>I13sBHBB')
DAOX_TRACK = struct.Struct(f'>{DAOX_ISRC_SIZE}sHHHQQQ')
CUEX_ENTRY = struct.Struct('>BBBBi')

def decode_daox(payload: bytes) -> NrgDaox:
    """Decodes the Disc-At-Once information chunk (DAOX).

    - 4 B: chunk size again, sometimes little endian
    - 13 B: UPC (text) or null bytes
    - 1 B: padding, always 0
    - 2 B: TOC type
    - 1 B: first track in the session
    - 1 B: last track in the session

    Followed by one 42-byte block per track:

    - 12 B: ISRC (text) or null bytes, not decoded
    - 2 B: sector size in the image file
    - 2 B: mode of the data in the image file
    - 2 B: unknown, always 0x0001
    - 8 B: index 0 (pregap), byte offset in the image
    - 8 B: index 1 (start of track), byte offset in the image
    - 8 B: end of track + 1, byte offset in the image
    """
    if len(payload) < DAOX_HEADER_SIZE:
        raise ValueError(f"payload is {len(payload)} bytes, shorter than the {DAOX_HEADER_SIZE}-byte DAOX header")
    if (len(payload) - DAOX_HEADER_SIZE) % DAOX_TRACK_SIZE:
        raise ValueError(f"payload of {len(payload)} bytes is not a {DAOX_HEADER_SIZE}-byte header "
                         f"followed by {DAOX_TRACK_SIZE}-byte track blocks")

    size2, upc, padding, toc_type, first_track, last_track = DAOX_HEADER.unpack_from(payload)

    tracks = []
    for offset in range(DAOX_HEADER_SIZE, len(payload), DAOX_TRACK_SIZE):
        _isrc, sector_size, data_mode, unknown, index0, index1, track_end = DAOX_TRACK.unpack_from(payload, offset)
        tracks.append(NrgDaoxTrack(sector_size=sector_size, data_mode=data_mode, unknown=unknown,
                                   index0=index0, index1=index1, track_end=track_end))

    return NrgDaox(size2=size2, upc=read_sized_string(upc), padding=padding, toc_type=toc_type,
                   first_track=first_track, last_track=last_track, tracks=tuple(tracks))

def decode_cuex(payload: bytes) -> NrgCuex:
    """Decodes the cue sheet chunk (CUEX): a list of 8-byte entries.

    - 1 B: ADR/control (0x01 audio, 0x21 audio with digital copy permitted, 0x41 data)
    - 1 B: track number, BCD (0 for the lead-in, 0xAA for the lead-out)
    - 1 B: index number, BCD
    - 1 B: padding, always 0
    - 4 B: position in sectors, signed (track 1 index 0 is usually -150)
    """
    if len(payload) % CUEX_ENTRY_SIZE:
        raise ValueError(f"payload of {len(payload)} bytes is not a multiple of {CUEX_ENTRY_SIZE}")

    return NrgCuex(entries=tuple(
        NrgCuexEntry(mode=mode, track_number=from_bcd(track_number), index_number=from_bcd(index_number),
                     padding=padding, position_sectors=position)
        for mode, track_number, index_number, padding, position in CUEX_ENTRY.iter_unpack(payload)
    ))

def decode_sinf(payload: bytes) -> NrgSinf:
    if len(payload) != SINF_SIZE:
        raise ValueError(f"payload is {len(payload)} bytes, expected {SINF_SIZE}")
    return NrgSinf(track_count=struct.unpack('>I', payload)[0])

def decode_mtyp(payload: bytes) -> NrgMtyp:
    if len(payload) != MTYP_SIZE:
        raise ValueError(f"payload is {len(payload)} bytes, expected {MTYP_SIZE}")
    return NrgMtyp(media_type=struct.unpack('>I', payload)[0])

def decode_afnm(payload: bytes) -> NrgAfnm:
    """Decodes the audio file names chunk (AFNM): one NUL-terminated name per track."""
    names = payload.split(b"\x00")
    if names and names[-1] == b"":
        names.pop()
    return NrgAfnm(names=tuple(name.decode('latin-1') for name in names))

Decoder = Callable[[bytes], Any]

@dataclass(frozen=True)
class ChunkRegistry:
    """Maps chunk IDs to payload decoders; everything else decodes to Opaque."""
    decoders: Mapping[ChunkTag, Decoder]
    length_size: int = CHUNK_LENGTH_SIZE
    end_tag: bytes = CHUNK_END_ID

    def __post_init__(self):
        if self.length_size not in CHUNK_LENGTH_SIZES:
            raise ValueError(f"Unsupported chunk length size: {self.length_size}")
        object.__setattr__(self, 'decoders', MappingProxyType(dict(self.decoders)))

    def with_length_size(self, length_size: int) -> 'ChunkRegistry':
        return replace(self, length_size=length_size)

    def is_recognized(self, chunk: Chunk) -> bool:
        return chunk.kind in self.decoders

    def decode(self, chunk: Chunk, source) -> Any:
        decoder = self.decoders.get(chunk.kind)
        if decoder is None:
            logger.debug(f"Keeping {chunk.name} chunk at offset {chunk.header_offset} as opaque")
            return Opaque(tag=chunk.tag, length=chunk.length, offset=chunk.offset)

        payload = chunk.read_payload(source)
        try:
            return decoder(payload)
        except (ValueError, struct.error) as e:
            raise MalformedChunk(str(e), chunk.tag, chunk.header_offset) from e

DEFAULT_REGISTRY = ChunkRegistry(decoders={
    ChunkTag.DAOX: decode_daox,
    ChunkTag.CUEX: decode_cuex,
    ChunkTag.SINF: decode_sinf,
    ChunkTag.MTYP: decode_mtyp,
    ChunkTag.AFNM: decode_afnm,
})
