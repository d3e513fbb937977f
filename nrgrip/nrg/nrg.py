import os
import logging
from typing import List, Optional
from uuid import UUID

from nrgrip.errors import MalformedChunk, NrgError
from nrgrip.error_number import ErrorNumber
from nrgrip.ifilter import IFilter

from .constants import *
from .chunks import walk_chunks
from .cue_sheet import write_cue_sheet
from .decoders import ChunkRegistry, DEFAULT_REGISTRY
from .footer import locate_chain
from .layout import build_image
from .raw_audio import extract_raw_audio
from .structs import NrgDaox, NrgImage, Opaque, Session, Track

logger = logging.getLogger(__name__)

def read_nrg_image(source, registry: ChunkRegistry = DEFAULT_REGISTRY, strict: bool = False) -> NrgImage:
    """Reads the footer and the chunk chain of an NRG v2 image and builds its model.

    A recognised chunk whose payload cannot be decoded is fatal with `strict`;
    otherwise it is kept for listing only and parsing goes on, as long as a
    usable DAOX chunk is found somewhere in the chain.
    """
    footer = locate_chain(source)
    logger.debug(f"NRG v{footer.version} image of {footer.file_size} bytes, chunks at {footer.chain_offset}")

    decoded_chunks = []
    first_error: Optional[MalformedChunk] = None
    for chunk in walk_chunks(source, footer.chain_offset, registry,
                             limit=footer.file_size - NRG_V2_FOOTER_SIZE):
        try:
            decoded = registry.decode(chunk, source)
        except MalformedChunk as e:
            if strict:
                raise
            logger.warning(f"{e}; keeping the chunk for listing only")
            first_error = first_error or e
            decoded = Opaque(tag=chunk.tag, length=chunk.length, offset=chunk.offset)
        decoded_chunks.append((chunk, decoded))

    if first_error and not any(isinstance(decoded, NrgDaox) for _, decoded in decoded_chunks):
        raise first_error

    return build_image(footer, decoded_chunks)

class Nrg:
    def __init__(self, registry: ChunkRegistry = DEFAULT_REGISTRY, strict: bool = False):
        self._registry = registry
        self._strict = strict
        self._nrg_filter: Optional[IFilter] = None
        self._image: Optional[NrgImage] = None
        self.last_error: Optional[Exception] = None

    @property
    def name(self) -> str:
        return "Nero Burning ROM image"

    @property
    def id(self) -> UUID:
        return UUID("D160F9FF-5BF7-4E37-8C5C-3D6C2B9A6E52")

    @property
    def format(self) -> str:
        return "Nero Burning ROM v2"

    @property
    def image(self) -> Optional[NrgImage]:
        return self._image

    @property
    def tracks(self) -> List[Track]:
        return self._image.tracks if self._image else []

    @property
    def sessions(self) -> List[Session]:
        return list(self._image.sessions) if self._image else []

    def identify(self, image_filter: IFilter) -> bool:
        try:
            return locate_chain(image_filter).version == 2
        except NrgError as e:
            logger.debug(f"Not an NRG v2 image: {image_filter.filename}: {e}")
            return False
        except OSError as e:
            logger.error(f"Exception trying to identify image file: {image_filter.filename}")
            logger.exception(e)
            return False

    def open(self, image_filter: IFilter) -> ErrorNumber:
        if image_filter is None:
            return ErrorNumber.NoSuchFile

        self._nrg_filter = image_filter
        self._image = None
        try:
            self._image = read_nrg_image(image_filter, self._registry, self._strict)
        except NrgError as e:
            return self._fail(f"Error reading {image_filter.filename}", e, e.error_number)
        except OSError as e:
            return self._fail(f"Cannot read {image_filter.filename}", e, ErrorNumber.CannotOpenFile)

        logger.debug(f"Opened {image_filter.filename}: {len(self.tracks)} tracks")
        return ErrorNumber.NoError

    def export_cue(self, path: str, audio_filename: Optional[str] = None) -> ErrorNumber:
        if self._image is None:
            return ErrorNumber.NoData
        if audio_filename is None:
            audio_filename = os.path.basename(os.path.splitext(path)[0] + RAW_EXTENSION)

        try:
            write_cue_sheet(self._image, path, audio_filename)
        except OSError as e:
            return self._fail(f"Error writing cue sheet {path}", e, ErrorNumber.InOutError)
        return ErrorNumber.NoError

    def extract_raw_audio(self, path: str, strip_subchannel: bool = False) -> ErrorNumber:
        if self._image is None:
            return ErrorNumber.NoData

        try:
            with open(path, 'wb') as sink:
                written = extract_raw_audio(self._image, self._nrg_filter, sink, strip_subchannel)
        except NrgError as e:
            return self._fail(f"Error extracting raw audio to {path}", e, e.error_number)
        except OSError as e:
            return self._fail(f"Error writing raw audio to {path}", e, ErrorNumber.InOutError)

        logger.info(f"Wrote {written} bytes of raw audio to {path}")
        return ErrorNumber.NoError

    def _fail(self, message: str, error: Exception, error_number: ErrorNumber) -> ErrorNumber:
        logger.error(f"{message}: {error}")
        self.last_error = error
        return error_number

    def close(self):
        if self._nrg_filter:
            self._nrg_filter.close()
            self._nrg_filter = None
        self._image = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
