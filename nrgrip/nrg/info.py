from typing import List

from nrgrip.CD.cd_types import SECTORS_PER_SECOND, TrackSubchannelType, enum_name
from .constants import DAOX_TRACK_UNKNOWN_DEFAULT
from .structs import NrgCuex, NrgDaox, NrgImage

def prettify_daox(daox: NrgDaox) -> str:
    output = [
        "Chunk ID: DAOX",
        "Chunk description: DAO (Disc At Once) Information",
        f"Chunk size 2: {daox.size2}",
        f'UPC: "{daox.upc}"',
    ]
    if daox.padding != 0:
        output.append(f"Padding: {daox.padding} (Warning: should be 0!)")
    output.append(f"TOC type: 0x{daox.toc_type:04X}")
    output.append(f"First track in the session: {daox.first_track}")
    output.append(f"Last track in the session: {daox.last_track}")

    for i, track in enumerate(daox.tracks, start=daox.first_track):
        output.append(f"Track {i:02d}:")
        output.append(f"\tSector size in the image file: {track.sector_size} Bytes")
        output.append(f"\tMode of the data in the image file: 0x{track.data_mode:04X}")
        if track.unknown != DAOX_TRACK_UNKNOWN_DEFAULT:
            output.append(f"\tUnknown field: 0x{track.unknown:04X} (Warning: should be 0x{DAOX_TRACK_UNKNOWN_DEFAULT:04X}!)")
        output.append(f"\tIndex0 (Pre-gap): {track.index0} Bytes")
        output.append(f"\tIndex1 (Start of track): {track.index1} Bytes")
        output.append(f"\tEnd of track + 1: {track.track_end} Bytes")
    return "\n".join(output)

def prettify_cuex(cuex: NrgCuex) -> str:
    output = ["Chunk ID: CUEX", "Chunk description: Cue Sheet"]
    if not cuex.entries:
        output.append("No CUEX tracks!")
    for entry in cuex.entries:
        output.append("Track:")
        output.append(f"\tMode: 0x{entry.mode:02X}")
        if entry.is_lead_in:
            output.append("\tTrack number: 0 (lead-in area)")
        elif entry.is_lead_out:
            output.append("\tTrack number: 0xAA (lead-out area)")
        else:
            output.append(f"\tTrack number: {entry.track_number}")
        output.append(f"\tIndex number: {entry.index_number}")
        if entry.padding != 0:
            output.append(f"\tPadding: {entry.padding} (Warning: should be 0!)")
        output.append(f"\tPosition: {entry.position_sectors} sectors ({entry.position_sectors / SECTORS_PER_SECOND:.2f} seconds)")
    return "\n".join(output)

def prettify_image(image: NrgImage) -> str:
    output: List[str] = [
        f"Image size: {image.file_size} Bytes",
        f"NRG format version: {image.version}",
        f"First chunk offset: {image.chain_offset}",
        "",
        "Chunks:",
        "ID     Offset      Size",
        "=========================",
    ]
    for chunk in image.chunks:
        output.append(f"{chunk.name:<7}{chunk.header_offset:<12}{chunk.length}")

    output += [
        "",
        "Image sessions:",
        "Session  First track  Last track",
        "=================================",
    ]
    for session in image.sessions:
        output.append(f"{session.number:<9}{session.first_track:<13}{session.last_track}")

    output += [
        "",
        "Image tracks:",
        "Track  Bps   Subchannel      Flags      Pregap  Start       Sectors   Title",
        "=====================================================================================",
    ]
    for track in image.tracks:
        flags = " ".join(flag for flag, is_set in (("DCP", track.copy_permitted), ("PRE", track.pre_emphasis)) if is_set)
        output.append(f"{track.number:<7}{track.sector_size:<6}{enum_name(TrackSubchannelType, track.subchannel_type):<16}"
                      f"{flags or '-':<11}{track.pregap:<8}{track.start_sector:<12}{track.sectors:<10}{track.title or ''}")

    output += [
        "",
        "Track indexes:",
        "Track  Index  Start",
        "=======================",
    ]
    for track in image.tracks:
        for index in track.indexes:
            output.append(f"{track.number:<7}{index.number:<7}{track.start_sector + index.offset}")

    if image.daox:
        output += ["", prettify_daox(image.daox)]
    if image.cuex:
        output += ["", prettify_cuex(image.cuex)]
    if image.sinf:
        output += ["", "Chunk ID: SINF", "Chunk description: Session Information",
                   f"Number of tracks in the session: {image.sinf.track_count}"]
    if image.mtyp:
        output += ["", "Chunk ID: MTYP", "Chunk description: Media Type",
                   f"Media type: 0x{image.mtyp.media_type:08X}"]
    if image.skipped_chunks:
        output += ["", f"Unhandled chunks present in this image: {' '.join(image.skipped_chunks)}"]

    return "\n".join(output)
