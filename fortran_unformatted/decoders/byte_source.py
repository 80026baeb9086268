import io
import logging
from typing import BinaryIO, Union
import mmap

from fortran_unformatted.models.errors import SourceError

logger = logging.getLogger(__name__)


class ByteSource:
    """
    Random-access byte source used by the decoders.

    Wraps a readable, seekable binary object (open file, io.BytesIO or mmap).
    The short-to-long fallback restarts decoding from offset 0, so seek
    support is required; non-seekable streams must be buffered by the caller.
    """

    def __init__(self, stream: Union[BinaryIO, mmap.mmap]):
        readable = getattr(stream, "readable", None)
        if readable is not None and not readable():
            raise SourceError("source does not support reading")
        seekable = getattr(stream, "seekable", None)
        if seekable is not None and not seekable():
            raise SourceError("source does not support seeking")

        self._stream = stream
        self._stream.seek(0, io.SEEK_END)
        self._length = self._stream.tell()
        self._stream.seek(0)
        logger.debug("Opened byte source: length=%d", self._length)

    @classmethod
    def from_bytes(cls, data: bytes) -> "ByteSource":
        return cls(io.BytesIO(bytes(data)))

    @property
    def length(self) -> int:
        return self._length

    @property
    def position(self) -> int:
        return self._stream.tell()

    @property
    def remaining(self) -> int:
        return self._length - self._stream.tell()

    def rewind(self) -> None:
        self._stream.seek(0)

    def seek(self, offset: int) -> None:
        self._stream.seek(offset)

    def read_byte(self) -> int:
        """Next byte as an int, or -1 when the source is exhausted."""
        data = self._stream.read(1)
        if not data:
            return -1
        return data[0]

    def read(self, size: int) -> bytes:
        """Up to `size` bytes; fewer only at the end of the source."""
        return self._stream.read(size)
