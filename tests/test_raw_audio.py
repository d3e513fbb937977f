import hashlib
import io
import unittest

from nrgrip.errors import ShortRead
from nrgrip.nrg.nrg import read_nrg_image
from nrgrip.nrg.raw_audio import expected_raw_size, extract_raw_audio

from nrg_builder import BytesSource, SUBCHANNEL_FILL, audio_image, sector_bytes


class ReadIntoSource(BytesSource):
    def read_into(self, offset, buffer):
        data = self.read_exact(offset, len(buffer))
        buffer[:] = data
        return len(data)


def extract(data, strip=False, source_class=BytesSource):
    image = read_nrg_image(BytesSource(data))
    sink = io.BytesIO()
    written = extract_raw_audio(image, source_class(data), sink, strip)
    return image, written, sink.getvalue()


class TestExtractRawAudio(unittest.TestCase):
    def test_plain_sectors(self) -> None:
        for strip in (False, True):
            image, written, raw = extract(audio_image((3, 2)), strip)
            self.assertEqual(written, 5 * 2352)
            self.assertEqual(len(raw), 5 * 2352)
            self.assertEqual(expected_raw_size(image, strip), 5 * 2352)

    def test_subchannel_sectors_kept(self) -> None:
        image, written, raw = extract(audio_image((3, 2), sector_size=2448))
        self.assertEqual(written, 5 * 2448)
        self.assertEqual(len(raw), expected_raw_size(image))
        self.assertEqual(raw[:2448], sector_bytes(1, 0, 2448))

    def test_subchannel_sectors_stripped(self) -> None:
        image, written, raw = extract(audio_image((3, 2), sector_size=2448), strip=True)
        self.assertEqual(written, 5 * 2352)
        self.assertEqual(expected_raw_size(image, True), 5 * 2352)
        self.assertNotIn(bytes([SUBCHANNEL_FILL]), raw)
        expected = b"".join(sector_bytes(track, sector, 2352)
                            for track, sectors in ((1, 3), (2, 2)) for sector in range(sectors))
        self.assertEqual(raw, expected)

    def test_sectors_in_track_order(self) -> None:
        _, _, raw = extract(audio_image((2, 3)), source_class=ReadIntoSource)
        expected = b"".join(sector_bytes(track, sector, 2352)
                            for track, sectors in ((1, 2), (2, 3)) for sector in range(sectors))
        self.assertEqual(raw, expected)

    def test_sink_keeps_every_sector(self) -> None:
        data = audio_image((2, 1), sector_size=2448)
        image = read_nrg_image(BytesSource(data))
        chunks = []

        class ListSink:
            def write(self, payload):
                chunks.append(payload)

        for strip, size in ((False, 2448), (True, 2352)):
            chunks.clear()
            extract_raw_audio(image, ReadIntoSource(data), ListSink(), strip)
            self.assertEqual({type(payload) for payload in chunks}, {bytes})
            self.assertEqual(chunks, [sector_bytes(1, 0, 2448)[:size], sector_bytes(1, 1, 2448)[:size],
                                      sector_bytes(2, 0, 2448)[:size]])

    def test_idempotent(self) -> None:
        data = audio_image((4, 4), sector_size=2448)
        digests = {hashlib.sha256(extract(data, strip=True)[2]).hexdigest() for _ in range(2)}
        self.assertEqual(len(digests), 1)

    def test_strip_on_plain_sectors_is_logged(self) -> None:
        with self.assertLogs('nrgrip.nrg.raw_audio', level='INFO') as logs:
            extract(audio_image((1,)), strip=True)
        self.assertTrue(any("nothing to strip" in line for line in logs.output))

    def test_short_read_reports_track_and_sector(self) -> None:
        data = audio_image((3, 2))
        image = read_nrg_image(BytesSource(data))
        truncated = data[:len(data) // 2]
        self.assertLess(len(truncated), 5 * 2352)
        sink = io.BytesIO()
        for source_class in (BytesSource, ReadIntoSource):
            with self.assertRaises(ShortRead) as ctx:
                extract_raw_audio(image, source_class(truncated), sink)
            self.assertEqual(ctx.exception.track, 1)
            self.assertEqual(ctx.exception.sector, 2)
            self.assertIn("track 01, sector 2", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
