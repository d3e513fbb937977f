import os
import unittest
from tempfile import TemporaryDirectory

from nrgrip.nrg.cue_sheet import render_cue_sheet, sector_to_msf, write_cue_sheet
from nrgrip.nrg.nrg import read_nrg_image

from nrg_builder import BytesSource, audio_image


class TestSectorToMsf(unittest.TestCase):
    def test_timecodes(self) -> None:
        self.assertEqual(sector_to_msf(0), "00:00:00")
        self.assertEqual(sector_to_msf(1), "00:00:01")
        self.assertEqual(sector_to_msf(74), "00:00:74")
        self.assertEqual(sector_to_msf(75), "00:01:00")
        self.assertEqual(sector_to_msf(150), "00:02:00")
        self.assertEqual(sector_to_msf(60 * 75), "01:00:00")
        self.assertEqual(sector_to_msf(79 * 60 * 75 + 59 * 75 + 74), "79:59:74")

    def test_negative_sector(self) -> None:
        with self.assertRaises(ValueError):
            sector_to_msf(-1)


class TestRenderCueSheet(unittest.TestCase):
    def test_two_tracks(self) -> None:
        image = read_nrg_image(BytesSource(audio_image((100, 50))))
        self.assertEqual(render_cue_sheet(image, "disc.raw"),
                         'FILE "disc.raw" BINARY\n'
                         '  TRACK 01 AUDIO\n'
                         '    INDEX 01 00:00:00\n'
                         '  TRACK 02 AUDIO\n'
                         '    INDEX 01 00:01:25\n')

    def test_pregap_and_titles(self) -> None:
        image = read_nrg_image(BytesSource(audio_image((10, 200), pregaps=(0, 150),
                                                       names=['C:\\rips\\Intro.wav', 'Say "hi".wav'])))
        self.assertEqual(render_cue_sheet(image, "a b.raw").splitlines(), [
            'FILE "a b.raw" BINARY',
            '  TRACK 01 AUDIO',
            '    TITLE "Intro"',
            '    INDEX 01 00:00:00',
            '  TRACK 02 AUDIO',
            '    TITLE "Say \'hi\'"',
            '    INDEX 00 00:00:10',
            '    INDEX 01 00:02:10',
        ])

    def test_timecodes_ignore_sector_size(self) -> None:
        plain = read_nrg_image(BytesSource(audio_image((100, 50), sector_size=2352)))
        with_subchannel = read_nrg_image(BytesSource(audio_image((100, 50), sector_size=2448)))
        self.assertEqual(render_cue_sheet(plain, "x.raw"), render_cue_sheet(with_subchannel, "x.raw"))

    def test_write_cue_sheet(self) -> None:
        image = read_nrg_image(BytesSource(audio_image((75,))))
        with TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "disc.cue")
            write_cue_sheet(image, path, "disc.raw")
            with open(path, encoding='utf-8') as f:
                self.assertEqual(f.read(), render_cue_sheet(image, "disc.raw"))


if __name__ == "__main__":
    unittest.main()
