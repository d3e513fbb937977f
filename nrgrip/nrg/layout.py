import ntpath
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from nrgrip.CD.cd_types import CdFlags, TrackSubchannelType
from nrgrip.errors import InconsistentLayout
from .constants import *
from .structs import (
    Chunk, IndexPoint, NrgAfnm, NrgCuex, NrgCuexEntry, NrgDaox, NrgDaoxTrack,
    NrgFooter, NrgImage, NrgMtyp, NrgSinf, Opaque, Session, Track
)

logger = logging.getLogger(__name__)

def build_image(footer: NrgFooter, decoded_chunks: Sequence[Tuple[Chunk, Any]]) -> NrgImage:
    """Folds the decoded chunks of an image into its session/track model.

    DAOX gives the geometry of every track; CUEX, when present, adds or
    corrects index points and track flags; AFNM names the tracks. The model
    is validated before it is returned.
    """
    daox_chunks: List[NrgDaox] = []
    cuex_chunks: List[NrgCuex] = []
    sinf_chunks: List[NrgSinf] = []
    mtyp: Optional[NrgMtyp] = None
    afnm: Optional[NrgAfnm] = None
    opaque: List[Opaque] = []

    for _chunk, decoded in decoded_chunks:
        if isinstance(decoded, NrgDaox):
            daox_chunks.append(decoded)
        elif isinstance(decoded, NrgCuex):
            cuex_chunks.append(decoded)
        elif isinstance(decoded, NrgSinf):
            sinf_chunks.append(decoded)
        elif isinstance(decoded, NrgMtyp):
            mtyp = decoded
        elif isinstance(decoded, NrgAfnm):
            afnm = decoded
        elif isinstance(decoded, Opaque):
            opaque.append(decoded)

    if not daox_chunks:
        raise InconsistentLayout("No DAOX chunk found: the image carries no track geometry")

    session_count = max(len(daox_chunks), len(sinf_chunks))
    if session_count > 1:
        raise InconsistentLayout(f"Image has {session_count} sessions; only single-session images are supported")

    daox = daox_chunks[0]
    cuex = cuex_chunks[0] if cuex_chunks else None
    sinf = sinf_chunks[0] if sinf_chunks else None

    if sinf and sinf.track_count != len(daox.tracks):
        logger.warning(f"SINF announces {sinf.track_count} tracks but DAOX describes {len(daox.tracks)}")

    tracks = tracks_from_daox(daox)
    if cuex:
        tracks = apply_cuex(tracks, cuex)
    if afnm:
        tracks = apply_titles(tracks, afnm)
    tracks = assign_start_sectors(tracks)

    image = NrgImage(
        version=footer.version,
        file_size=footer.file_size,
        chain_offset=footer.chain_offset,
        chunks=tuple(chunk for chunk, _ in decoded_chunks),
        sessions=(Session(number=1, tracks=tuple(tracks)),),
        daox=daox,
        cuex=cuex,
        sinf=sinf,
        mtyp=mtyp,
        afnm=afnm,
        opaque=tuple(opaque),
    )
    validate_tracks(image.tracks, image.data_extent)
    return image

def tracks_from_daox(daox: NrgDaox) -> List[Track]:
    if not daox.tracks:
        raise InconsistentLayout("DAOX chunk describes no tracks")
    if daox.last_track - daox.first_track + 1 != len(daox.tracks):
        logger.warning(f"DAOX announces tracks {daox.first_track}-{daox.last_track} "
                       f"but describes {len(daox.tracks)}")

    return [daox_track_to_track(daox.first_track + i, daox_track)
            for i, daox_track in enumerate(daox.tracks)]

def daox_track_to_track(number: int, daox_track: NrgDaoxTrack) -> Track:
    sector_size = daox_track.sector_size
    if sector_size not in SUPPORTED_SECTOR_SIZES:
        raise InconsistentLayout(f"Track {number:02d}: unsupported sector size {sector_size} "
                                 f"(expected one of {', '.join(map(str, SUPPORTED_SECTOR_SIZES))})")

    if not daox_track.index0 <= daox_track.index1 <= daox_track.track_end:
        raise InconsistentLayout(f"Track {number:02d}: index 0 ({daox_track.index0}), index 1 ({daox_track.index1}) "
                                 f"and end ({daox_track.track_end}) are out of order")

    pregap_bytes = daox_track.index1 - daox_track.index0
    track_bytes = daox_track.track_end - daox_track.index0
    if pregap_bytes % sector_size or track_bytes % sector_size:
        raise InconsistentLayout(f"Track {number:02d}: byte offsets are not aligned on {sector_size}-byte sectors")

    pregap = pregap_bytes // sector_size
    if pregap:
        indexes = (IndexPoint(0, 0), IndexPoint(1, pregap))
    else:
        indexes = (IndexPoint(1, 0),)

    return Track(
        number=number,
        sector_size=sector_size,
        start_offset=daox_track.index0,
        sectors=track_bytes // sector_size,
        indexes=indexes,
        data_mode=daox_track.data_mode,
        subchannel_type=(TrackSubchannelType.RawInterleaved if sector_size == AUDIO_SUBCHANNEL_SECTOR_SIZE
                         else TrackSubchannelType.None_),
    )

def apply_cuex(tracks: List[Track], cuex: NrgCuex) -> List[Track]:
    """Merges the CUEX index points into the tracks built from DAOX.

    CUEX positions are absolute disc positions; they are made relative to the
    start of the stored track region through the track's index 1, whose
    track-relative offset DAOX already gives. Positions before the stored
    region (the usual -150 of track 1 index 0 when the pregap is not in the
    image) are dropped.
    """
    entries_by_track: Dict[int, List[NrgCuexEntry]] = {}
    for entry in cuex.entries:
        if entry.is_lead_in or entry.is_lead_out:
            continue
        entries_by_track.setdefault(entry.track_number, []).append(entry)

    known_numbers = {track.number for track in tracks}
    unknown_numbers = sorted(set(entries_by_track) - known_numbers)
    if unknown_numbers:
        raise InconsistentLayout(f"CUEX lists track(s) {', '.join(map(str, unknown_numbers))} "
                                 f"missing from the DAOX geometry")

    merged = []
    for track in tracks:
        entries = entries_by_track.get(track.number)
        if not entries:
            merged.append(track)
            continue
        merged.append(merge_track_entries(track, entries))
    return merged

def merge_track_entries(track: Track, entries: List[NrgCuexEntry]) -> Track:
    if any(CdFlags.DataTrack in entry.control for entry in entries):
        raise InconsistentLayout(f"Track {track.number:02d} is a data track; only audio discs are supported")

    index1_entries = [entry for entry in entries if entry.index_number == 1]
    if not index1_entries:
        raise InconsistentLayout(f"CUEX lists no index 1 for track {track.number:02d}")
    region_start = index1_entries[0].position_sectors - track.pregap

    seen = set()
    indexes = {index.number: index.offset for index in track.indexes}
    for entry in entries:
        if entry.index_number in seen:
            raise InconsistentLayout(f"CUEX lists index {entry.index_number:02d} of track {track.number:02d} twice")
        seen.add(entry.index_number)

        offset = entry.position_sectors - region_start
        if offset < 0:
            logger.debug(f"Dropping track {track.number:02d} index {entry.index_number:02d} at "
                         f"{entry.position_sectors}: before the data stored in the image")
            continue
        indexes[entry.index_number] = offset

    control = index1_entries[0].control
    return replace(track,
                   indexes=tuple(IndexPoint(number, offset) for number, offset in sorted(indexes.items())),
                   copy_permitted=CdFlags.CopyPermitted in control,
                   pre_emphasis=CdFlags.PreEmphasis in control)

def apply_titles(tracks: List[Track], afnm: NrgAfnm) -> List[Track]:
    if len(afnm.names) != len(tracks):
        logger.warning(f"AFNM names {len(afnm.names)} files for {len(tracks)} tracks")

    titled = []
    for i, track in enumerate(tracks):
        if i < len(afnm.names) and afnm.names[i]:
            title = ntpath.splitext(ntpath.basename(afnm.names[i]))[0]
            track = replace(track, title=title)
        titled.append(track)
    return titled

def assign_start_sectors(tracks: List[Track]) -> List[Track]:
    """Places each track in the extracted audio stream, right after the previous one."""
    positioned = []
    start_sector = 0
    for track in tracks:
        positioned.append(replace(track, start_sector=start_sector))
        start_sector += track.sectors
    return positioned

def validate_tracks(tracks: Sequence[Track], data_extent: int):
    """Raises InconsistentLayout unless the tracks form a valid audio layout."""
    previous: Optional[Track] = None
    for track in tracks:
        if track.number < 1:
            raise InconsistentLayout(f"Invalid track number {track.number}")
        if track.sector_size not in SUPPORTED_SECTOR_SIZES:
            raise InconsistentLayout(f"Track {track.number:02d}: unsupported sector size {track.sector_size}")
        if track.sectors <= 0:
            raise InconsistentLayout(f"Track {track.number:02d} is empty")

        validate_indexes(track)

        if previous is not None:
            if track.number <= previous.number:
                raise InconsistentLayout(f"Track {track.number:02d} follows track {previous.number:02d}: "
                                         f"track numbers must increase")
            if track.start_offset < previous.end_offset:
                raise InconsistentLayout(f"Track {track.number:02d} starts at offset {track.start_offset}, "
                                         f"inside track {previous.number:02d} which ends at {previous.end_offset}")

        if track.end_offset > data_extent:
            raise InconsistentLayout(f"Track {track.number:02d} ends at offset {track.end_offset}, "
                                     f"past the end of the audio data at {data_extent}")
        previous = track

def validate_indexes(track: Track):
    numbers = [index.number for index in track.indexes]
    if len(set(numbers)) != len(numbers):
        raise InconsistentLayout(f"Track {track.number:02d} has duplicate index numbers")
    if 1 not in numbers:
        raise InconsistentLayout(f"Track {track.number:02d} has no index 1")

    last_offset = 0
    for index in sorted(track.indexes, key=lambda i: i.number):
        if not 0 <= index.offset < track.sectors:
            raise InconsistentLayout(f"Track {track.number:02d} index {index.number:02d} at sector {index.offset} "
                                     f"is outside the track ({track.sectors} sectors)")
        if index.offset < last_offset:
            raise InconsistentLayout(f"Track {track.number:02d} index {index.number:02d} at sector {index.offset} "
                                     f"comes before the previous index")
        last_offset = index.offset
