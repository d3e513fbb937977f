import struct
import logging
from typing import Iterator, Optional

from nrgrip.errors import MalformedChunk
from .constants import *
from .decoders import ChunkRegistry, DEFAULT_REGISTRY
from .structs import Chunk

logger = logging.getLogger(__name__)

LENGTH_FORMATS = {4: '>I', 8: '>Q'}

def walk_chunks(source, chain_offset: int, registry: ChunkRegistry = DEFAULT_REGISTRY,
                limit: Optional[int] = None) -> Iterator[Chunk]:
    """Yields the chunk headers of the chain starting at `chain_offset`.

    Only IDs and lengths are read; payloads stay on disk until a decoder asks
    for them. The walk stops at the END! chunk, which is not yielded. `limit`
    is the offset no chunk may cross and defaults to the end of the file.
    """
    if limit is None:
        limit = source.length
    length_size = registry.length_size
    length_format = LENGTH_FORMATS[length_size]
    header_size = CHUNK_ID_SIZE + length_size

    offset = chain_offset
    while True:
        if offset + CHUNK_ID_SIZE > limit:
            raise MalformedChunk("chunk chain ends without an END! chunk", offset=offset)

        tag = source.read_exact(offset, CHUNK_ID_SIZE)
        if tag == registry.end_tag:
            logger.debug(f"End of chunk chain at offset {offset}")
            return

        if offset + header_size > limit:
            raise MalformedChunk("chunk header crosses the end of the file", tag, offset)

        (length,) = struct.unpack(length_format, source.read_exact(offset + CHUNK_ID_SIZE, length_size))
        payload_offset = offset + header_size
        if payload_offset + length > limit:
            raise MalformedChunk(f"declared length {length} runs past the end of the file ({limit} bytes)", tag, offset)

        chunk = Chunk(tag=tag, length=length, offset=payload_offset, header_offset=offset)
        logger.debug(f"Chunk {chunk.name} at offset {offset}, {length} bytes")
        yield chunk
        offset = chunk.end
