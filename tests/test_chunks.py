import struct
import unittest

from nrgrip.errors import MalformedChunk
from nrgrip.nrg.chunks import walk_chunks
from nrgrip.nrg.decoders import DEFAULT_REGISTRY
from nrgrip.nrg.structs import ChunkTag

from nrg_builder import BytesSource, assemble, audio_image, chunk, end_chunk


class TestWalkChunks(unittest.TestCase):
    def test_visits_every_chunk_once_in_file_order(self) -> None:
        data = assemble(b"\x00" * 16, [(b"AAAA", b"1"), (b"DAOX", b"22"), (b"ZZZZ", b""), (b"SINF", b"4444")])
        chunks = list(walk_chunks(BytesSource(data), 16))

        self.assertEqual([c.tag for c in chunks], [b"AAAA", b"DAOX", b"ZZZZ", b"SINF"])
        self.assertEqual([c.length for c in chunks], [1, 2, 0, 4])
        offsets = [c.header_offset for c in chunks]
        self.assertEqual(offsets, sorted(set(offsets)))
        self.assertEqual(chunks[0].header_offset, 16)
        self.assertEqual(chunks[0].offset, 16 + 12)
        for previous, current in zip(chunks, chunks[1:]):
            self.assertEqual(previous.end, current.header_offset)

    def test_end_chunk_is_not_yielded(self) -> None:
        data = assemble(b"", [(b"DAOX", b"")])
        tags = [c.tag for c in walk_chunks(BytesSource(data), 0)]
        self.assertNotIn(b"END!", tags)

    def test_unknown_tags_map_to_unknown_kind(self) -> None:
        data = assemble(b"", [(b"QQQQ", b"xyz"), (b"ETN2", b"")])
        kinds = [c.kind for c in walk_chunks(BytesSource(data), 0)]
        self.assertEqual(kinds, [ChunkTag.UNKNOWN, ChunkTag.ETN2])

    def test_payloads_are_not_read(self) -> None:
        source = BytesSource(audio_image((2,)))
        footer_offset = 2 * 2352
        list(walk_chunks(source, footer_offset))
        self.assertTrue(all(length <= 8 for _, length in source.reads))

    def test_four_byte_lengths(self) -> None:
        data = assemble(b"", [(b"DAOX", b"abc"), (b"CUEX", b"")], length_size=4)
        registry = DEFAULT_REGISTRY.with_length_size(4)
        chunks = list(walk_chunks(BytesSource(data), 0, registry))
        self.assertEqual([(c.tag, c.length, c.offset) for c in chunks], [(b"DAOX", 3, 8), (b"CUEX", 0, 19)])

    def test_length_past_end_of_file(self) -> None:
        data = b"DAOX" + struct.pack('>Q', 255) + end_chunk()
        with self.assertRaises(MalformedChunk) as ctx:
            list(walk_chunks(BytesSource(data), 0))
        self.assertEqual(ctx.exception.tag, b"DAOX")
        self.assertEqual(ctx.exception.offset, 0)

    def test_chain_without_end(self) -> None:
        data = assemble(b"", [(b"DAOX", b"")], with_end=False)
        with self.assertRaises(MalformedChunk):
            list(walk_chunks(BytesSource(data), 0, limit=len(data) - 12))

    def test_header_crossing_limit(self) -> None:
        data = chunk(b"DAOX", b"")[:8]
        with self.assertRaises(MalformedChunk):
            list(walk_chunks(BytesSource(data), 0))

    def test_walk_is_lazy(self) -> None:
        data = assemble(b"", [(b"DAOX", b""), (b"CUEX", b"")]) + b"garbage"
        chunks = walk_chunks(BytesSource(data), 0)
        self.assertEqual(next(chunks).tag, b"DAOX")


if __name__ == "__main__":
    unittest.main()
