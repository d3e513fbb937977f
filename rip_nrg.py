#!/usr/bin/env python3

""" rip_nrg.py: Extract the cue sheet and the raw audio data of a Nero Burning
ROM (NRG v2) audio CD image.
"""
import os
import sys
import logging
import argparse
import inquirer

from nrgrip.error_number import ErrorNumber
from nrgrip.nrg_filter import NrgFilter
from nrgrip.nrg.constants import CHUNK_LENGTH_SIZE, CHUNK_LENGTH_SIZES, CUE_EXTENSION, RAW_EXTENSION
from nrgrip.nrg.decoders import DEFAULT_REGISTRY
from nrgrip.nrg.info import prettify_image
from nrgrip.nrg.nrg import Nrg
from nrgrip.nrg.utilities import make_output_file_name

__version__ = '0.3'

def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog='nrgrip',
        description='NRGrip - rip Nero Burning ROM audio images')
    parser.add_argument('image', help='NRG image to read')
    parser.add_argument('-i', '--info', action='store_true',
                        help="display the image's metadata (default action)")
    parser.add_argument('-x', '--extract', action='store_true',
                        help='same as --extract-cue --extract-raw')
    parser.add_argument('-c', '--extract-cue', action='store_true',
                        help='extract cue sheet from the NRG metadata')
    parser.add_argument('-r', '--extract-raw', action='store_true',
                        help='extract the raw audio tracks')
    parser.add_argument('-o', '--output-dir',
                        help="directory for the extracted files (default: the image's directory)")
    parser.add_argument('--keep-subchannel', action='store_true',
                        help='keep the 96-byte subchannel of each sector in the raw audio')
    parser.add_argument('--strict', action='store_true',
                        help='fail on any chunk that cannot be decoded')
    parser.add_argument('--length-size', type=int, choices=CHUNK_LENGTH_SIZES, default=CHUNK_LENGTH_SIZE,
                        help='width in bytes of the chunk length fields (default: %(default)s)')
    parser.add_argument('-f', '--force', action='store_true',
                        help='overwrite existing output files without asking')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='print debugging messages')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser.parse_args(argv)

def confirm_overwrite(path: str, force: bool) -> bool:
    if force or not os.path.exists(path):
        return True
    if not sys.stdin.isatty():
        print(f'"{path}" already exists; use --force to overwrite it')
        return False
    return inquirer.confirm(f'"{path}" already exists, overwrite?', default=False)

def main(argv=None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s: %(message)s')

    action_cue = args.extract_cue or args.extract
    action_raw = args.extract_raw or args.extract
    action_info = args.info or not (action_cue or action_raw)

    print(f'NRG image path: "{args.image}"')
    image_filter = NrgFilter(args.image)
    if not image_filter.identify(args.image):
        print(f'"{args.image}" is not an NRG image')
        return 1

    output_dir = args.output_dir or os.path.dirname(args.image)
    cue_path = make_output_file_name(args.image, CUE_EXTENSION, output_dir)
    raw_path = make_output_file_name(args.image, RAW_EXTENSION, output_dir)

    registry = DEFAULT_REGISTRY.with_length_size(args.length_size)
    with Nrg(registry=registry, strict=args.strict) as nrg:
        if nrg.open(image_filter) != ErrorNumber.NoError:
            print(f'Error reading "{args.image}": {nrg.last_error}')
            return 1

        if action_info:
            print(f"\n{prettify_image(nrg.image)}")

        if action_cue:
            print("\nExtracting cue sheet...")
            if not confirm_overwrite(cue_path, args.force):
                return 1
            if nrg.export_cue(cue_path, os.path.basename(raw_path)) != ErrorNumber.NoError:
                print(f"Error writing cue sheet: {nrg.last_error}")
                return 1
            print("OK!")

        if action_raw:
            print("\nExtracting raw audio data...")
            if not confirm_overwrite(raw_path, args.force):
                return 1
            if nrg.extract_raw_audio(raw_path, strip_subchannel=not args.keep_subchannel) != ErrorNumber.NoError:
                print(f"Error extracting raw audio data: {nrg.last_error}")
                if os.path.exists(raw_path):
                    os.remove(raw_path)
                return 1
            print("OK!")

    return 0

if __name__ == "__main__":
    sys.exit(main())
