import struct
import logging

from nrgrip.errors import FooterNotFound, Truncated, UnsupportedVersion
from .constants import *
from .structs import NrgFooter

logger = logging.getLogger(__name__)

def locate_chain(source) -> NrgFooter:
    """Reads the footer of an NRG image and returns where its chunk chain starts.

    The NRG v2 footer occupies the last 12 bytes of the file: the "NER5" ID
    followed by the big-endian 64-bit offset of the first chunk. NRG v1 images
    end with "NERO" and a 32-bit offset instead; they are recognised only to be
    rejected with a precise message.
    """
    file_size = source.length
    if file_size < NRG_V2_FOOTER_SIZE:
        raise Truncated(f"File is {file_size} bytes long, smaller than the {NRG_V2_FOOTER_SIZE}-byte NRG footer")

    footer = source.read_exact(file_size - NRG_V2_FOOTER_SIZE, NRG_V2_FOOTER_SIZE)
    footer_id, chain_offset = struct.unpack('>4sQ', footer)
    logger.debug(f"Footer ID: {footer_id!r}, first chunk offset: {chain_offset}")

    if footer_id != NRG_V2_FOOTER_ID:
        if footer[4:8] == NRG_V1_FOOTER_ID:
            raise UnsupportedVersion("NRG v1 image (NERO footer); only NRG v2 is supported", version=1)
        raise FooterNotFound(f"No NRG footer: the file ends with {footer_id!r} instead of {NRG_V2_FOOTER_ID!r}; "
                             f"it is not an NRG image or it is truncated")

    if chain_offset > file_size - NRG_V2_FOOTER_SIZE:
        raise Truncated(f"First chunk offset {chain_offset} lies beyond the end of the {file_size}-byte image")

    return NrgFooter(version=2, chain_offset=chain_offset, file_size=file_size)
