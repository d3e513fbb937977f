import logging

from nrgrip.CD.cd_types import lba_to_msf
from .structs import NrgImage

logger = logging.getLogger(__name__)

def sector_to_msf(sector: int) -> str:
    """Formats a sector position as a cue sheet mm:ss:ff timecode (75 frames per second)."""
    if sector < 0:
        raise ValueError(f"Cannot express negative sector position {sector} as a timecode")
    return "{:02d}:{:02d}:{:02d}".format(*lba_to_msf(sector))

def render_cue_sheet(image: NrgImage, audio_filename: str) -> str:
    lines = [f'FILE "{audio_filename}" BINARY']
    for track in image.tracks:
        lines.append(f"  TRACK {track.number:02d} AUDIO")
        if track.title:
            title = track.title.replace('"', "'")
            lines.append(f'    TITLE "{title}"')
        for index in track.indexes:
            lines.append(f"    INDEX {index.number:02d} {sector_to_msf(track.start_sector + index.offset)}")
    return "\n".join(lines) + "\n"

def write_cue_sheet(image: NrgImage, path: str, audio_filename: str):
    cue_sheet = render_cue_sheet(image, audio_filename)
    with open(path, 'w', encoding='utf-8', newline='\n') as f:
        f.write(cue_sheet)
    logger.info(f"Wrote cue sheet for {len(image.tracks)} tracks to {path}")
