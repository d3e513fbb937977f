import io
import os
import unittest
from contextlib import redirect_stdout
from tempfile import TemporaryDirectory
from unittest import mock

import rip_nrg

from nrg_builder import audio_image, write_image


def run(argv):
    out = io.StringIO()
    with redirect_stdout(out):
        code = rip_nrg.main(argv)
    return code, out.getvalue()


class TestCommandLine(unittest.TestCase):
    def test_info_is_the_default_action(self) -> None:
        with TemporaryDirectory() as tmp:
            path = write_image(tmp, audio_image((100, 50)))
            code, out = run([path])
            self.assertEqual(code, 0)
            self.assertIn("Image tracks:", out)
            self.assertEqual(sorted(os.listdir(tmp)), ["image.nrg"])

    def test_extract_everything(self) -> None:
        with TemporaryDirectory() as tmp:
            path = write_image(tmp, audio_image((100, 50), sector_size=2448), "Disc.nrg")
            code, _ = run(["-x", "-f", path])
            self.assertEqual(code, 0)
            with open(os.path.join(tmp, "Disc.cue"), encoding='utf-8') as f:
                cue_sheet = f.read()
            self.assertIn('FILE "Disc.raw" BINARY', cue_sheet)
            self.assertIn("    INDEX 01 00:01:25", cue_sheet)
            self.assertEqual(os.path.getsize(os.path.join(tmp, "Disc.raw")), 150 * 2352)

    def test_keep_subchannel_and_output_dir(self) -> None:
        with TemporaryDirectory() as tmp:
            path = write_image(tmp, audio_image((10,), sector_size=2448))
            out_dir = os.path.join(tmp, "out")
            os.mkdir(out_dir)
            code, _ = run(["-r", "--keep-subchannel", "-o", out_dir, path])
            self.assertEqual(code, 0)
            self.assertEqual(os.listdir(out_dir), ["image.raw"])
            self.assertEqual(os.path.getsize(os.path.join(out_dir, "image.raw")), 10 * 2448)

    def test_four_byte_chunk_lengths(self) -> None:
        with TemporaryDirectory() as tmp:
            path = write_image(tmp, audio_image((10,), length_size=4))
            self.assertEqual(run(["-c", "--length-size", "4", path])[0], 0)
            self.assertNotEqual(run(["-c", "-f", path])[0], 0)

    def test_not_an_nrg_image(self) -> None:
        with TemporaryDirectory() as tmp:
            path = write_image(tmp, b"\x00" * 100)
            code, out = run([path])
            self.assertEqual(code, 1)
            self.assertIn("is not an NRG image", out)

    def test_existing_output_without_terminal(self) -> None:
        with TemporaryDirectory() as tmp:
            path = write_image(tmp, audio_image((10,)))
            write_image(tmp, b"old", "image.cue")
            with mock.patch("sys.stdin") as stdin:
                stdin.isatty.return_value = False
                code, out = run(["-c", path])
            self.assertEqual(code, 1)
            self.assertIn("use --force", out)
            with open(os.path.join(tmp, "image.cue"), 'rb') as f:
                self.assertEqual(f.read(), b"old")

    def test_existing_output_is_confirmed(self) -> None:
        with TemporaryDirectory() as tmp:
            path = write_image(tmp, audio_image((10,)))
            write_image(tmp, b"old", "image.cue")
            with mock.patch("sys.stdin") as stdin, mock.patch("rip_nrg.inquirer.confirm", return_value=True) as confirm:
                stdin.isatty.return_value = True
                code, _ = run(["-c", path])
            self.assertEqual(code, 0)
            confirm.assert_called_once()
            with open(os.path.join(tmp, "image.cue"), encoding='utf-8') as f:
                self.assertTrue(f.read().startswith("FILE"))


if __name__ == "__main__":
    unittest.main()
