import os
from typing import Optional, BinaryIO
from nrgrip.error_number import ErrorNumber
from nrgrip.errors import ShortRead

class IFilter:
    """Seekable, read-only view of an image file on disk."""

    def __init__(self, path: str):
        self._path = path
        self._stream: Optional[BinaryIO] = None

    @property
    def filename(self) -> str:
        return os.path.basename(self._path)

    @property
    def length(self) -> int:
        return os.path.getsize(self._path)

    def get_data_fork_stream(self) -> BinaryIO:
        if not self._stream or self._stream.closed:
            self._stream = open(self._path, 'rb')
        return self._stream

    def read_exact(self, offset: int, length: int) -> bytes:
        stream = self.get_data_fork_stream()
        stream.seek(offset)
        data = stream.read(length)
        if len(data) != length:
            raise ShortRead(offset, length, len(data))
        return data

    def read_into(self, offset: int, buffer) -> int:
        """Fills `buffer` from `offset`; raises ShortRead unless it is filled completely."""
        stream = self.get_data_fork_stream()
        stream.seek(offset)
        view = memoryview(buffer)
        bytes_read = stream.readinto(view)
        if bytes_read != len(view):
            raise ShortRead(offset, len(view), bytes_read or 0)
        return bytes_read

    def identify(self, path: str) -> bool:
        # This method should be overridden by specific filter implementations
        return False

    def open(self, path: str) -> ErrorNumber:
        if not self.identify(path):
            return ErrorNumber.InvalidArgument

        self.close()
        try:
            self._path = path
            self._stream = open(path, 'rb')
            return ErrorNumber.NoError
        except IOError:
            return ErrorNumber.CannotOpenFile

    def close(self):
        if self._stream:
            self._stream.close()
            self._stream = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
