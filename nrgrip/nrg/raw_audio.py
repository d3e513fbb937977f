import logging

from nrgrip.errors import ShortRead
from .constants import *
from .structs import NrgImage, Track

logger = logging.getLogger(__name__)

def output_sector_size(track: Track, strip_subchannel: bool) -> int:
    if strip_subchannel and track.has_subchannel:
        return AUDIO_SECTOR_SIZE
    return track.sector_size

def expected_raw_size(image: NrgImage, strip_subchannel: bool = False) -> int:
    return sum(track.sectors * output_sector_size(track, strip_subchannel) for track in image.tracks)

def extract_raw_audio(image: NrgImage, source, sink, strip_subchannel: bool = False) -> int:
    """Copies the sectors of every track, in order, from `source` to `sink`.

    The output is headerless 16-bit little-endian stereo PCM at 44100 Hz.
    With `strip_subchannel`, the trailing 96 subchannel bytes of 2448-byte
    sectors are dropped; on 2352-byte sectors the flag changes nothing.
    A short read aborts the extraction with ShortRead; whatever was already
    written to `sink` is left there. Returns the number of bytes written.
    """
    tracks = image.tracks
    if strip_subchannel and not any(track.has_subchannel for track in tracks):
        logger.info("No subchannel data in this image, nothing to strip")

    buffer = bytearray(max((track.sector_size for track in tracks), default=AUDIO_SECTOR_SIZE))
    view = memoryview(buffer)
    read_into = getattr(source, 'read_into', None)
    written = 0

    for track in tracks:
        sector_view = view[:track.sector_size]
        payload = sector_view[:output_sector_size(track, strip_subchannel)]
        logger.info(f"Extracting track {track.number:02d}: {track.sectors} sectors of {track.sector_size} bytes")

        for sector in range(track.sectors):
            offset = track.sector_offset(sector)
            try:
                if read_into is not None:
                    read_into(offset, sector_view)
                else:
                    data = source.read_exact(offset, track.sector_size)
                    if len(data) != track.sector_size:
                        raise ShortRead(offset, track.sector_size, len(data))
                    sector_view[:] = data
            except ShortRead as e:
                raise ShortRead(e.offset, e.expected, e.got, track=track.number, sector=sector) from e
            sink.write(bytes(payload))
            written += len(payload)

    logger.debug(f"Wrote {written} bytes of raw audio")
    return written
