from typing import Optional
from nrgrip.error_number import ErrorNumber

class NrgError(Exception):
    """Base class for every failure while reading or ripping an NRG image."""
    error_number = ErrorNumber.InvalidArgument

class UnsupportedVersion(NrgError):
    error_number = ErrorNumber.NotSupported

    def __init__(self, message: str, version: Optional[int] = None):
        super().__init__(message)
        self.version = version

class Truncated(NrgError):
    pass

class MalformedChunk(NrgError):
    def __init__(self, message: str, tag: bytes = b"", offset: int = -1):
        tag_text = tag.decode('latin-1') if tag else "????"
        super().__init__(f"{tag_text} chunk at offset {offset}: {message}")
        self.tag = tag
        self.offset = offset

class InconsistentLayout(NrgError):
    pass

class ShortRead(NrgError):
    error_number = ErrorNumber.InOutError

    def __init__(self, offset: int, expected: int, got: int,
                 track: Optional[int] = None, sector: Optional[int] = None):
        message = f"Expected to read {expected} bytes at offset {offset}, but read {got} bytes"
        if track is not None:
            message += f" (track {track:02d}, sector {sector})"
        super().__init__(message)
        self.offset = offset
        self.expected = expected
        self.got = got
        self.track = track
        self.sector = sector

class FooterNotFound(UnsupportedVersion, Truncated):
    """No NRG footer at the end of the file: either not an NRG image, or one cut short."""
