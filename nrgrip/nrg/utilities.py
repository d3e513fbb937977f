import os

from .constants import *

def from_bcd(value: int) -> int:
    """Decodes a BCD byte; values that are not valid BCD (e.g. 0xAA) are returned as is."""
    decoded = (value >> 4) * 10 + (value & 0x0F)
    if decoded < 100:
        return decoded
    return value

def read_sized_string(data: bytes) -> str:
    """Decodes a fixed-size text field, truncated at its first NUL byte."""
    return data.split(b"\x00", 1)[0].decode('ascii', errors='replace')

def make_output_file_name(image_path: str, extension: str, output_dir: str = None) -> str:
    """`image.nrg` -> `image<extension>`; other names simply get `extension` appended."""
    base_name = os.path.basename(image_path)
    if base_name.lower().endswith(NRG_EXTENSION):
        base_name = base_name[:-len(NRG_EXTENSION)]
    if output_dir is None:
        output_dir = os.path.dirname(image_path)
    return os.path.join(output_dir, base_name + extension)
