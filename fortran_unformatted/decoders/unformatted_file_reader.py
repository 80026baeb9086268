import errno
import io
import logging
import mmap
import os
from pathlib import Path
from typing import BinaryIO, Iterator

from fortran_unformatted.decoders.byte_source import ByteSource
from fortran_unformatted.decoders.format_dispatcher import FormatDispatcher
from fortran_unformatted.models.errors import SourceError, UnformattedFileError
from fortran_unformatted.models.record import Record
from fortran_unformatted.models.record_store import RecordStore

logger = logging.getLogger(__name__)


class UnformattedFileReader:
    """
    Reads Fortran unformatted sequential files into memory.

    Every error leaving the reader carries the source identifier: the
    absolute file path, or "stream <id>" for streams. Decoder options
    (allow_fallback, byteorder) are passed through to FormatDispatcher.
    """

    def __init__(self, file_path: str, **decoder_options):
        self.file_path = file_path
        self.decoder_options = decoder_options

    def read_store(self) -> RecordStore:
        """Decode the whole file using memory mapping."""
        path = Path(self.file_path)
        if not path.is_file():
            raise FileNotFoundError(errno.ENOENT, "Cannot access file", str(path))
        source_id = str(path.resolve())
        dispatcher = FormatDispatcher(**self.decoder_options)

        try:
            with open(path, 'rb') as file:
                # mmap refuses empty files
                if os.fstat(file.fileno()).st_size == 0:
                    raise SourceError("source is empty")
                with mmap.mmap(file.fileno(), 0, access=mmap.ACCESS_READ) as mmapped_file:
                    return dispatcher.decode(ByteSource(mmapped_file), source_id)
        except UnformattedFileError as exc:
            raise exc.with_source(source_id)
        except OSError as exc:
            raise SourceError(str(exc), source_id=source_id) from exc

    def read_records(self) -> Iterator[Record]:
        """Decode the file and yield its logical records in order."""
        yield from self.read_store().records

    @staticmethod
    def read_stream(stream: BinaryIO, **decoder_options) -> RecordStore:
        """
        Decode an open binary stream.

        Non-seekable streams are copied into memory first, since a fallback
        to long records rereads the data from the start.
        """
        source_id = f"stream {id(stream) & 0xFFFFFFFF:08x}"
        dispatcher = FormatDispatcher(**decoder_options)

        try:
            # Same check as ByteSource, needed here before buffering reads the stream
            readable = getattr(stream, "readable", None)
            if readable is not None and not readable():
                raise SourceError("source does not support reading")
            seekable = getattr(stream, "seekable", None)
            if seekable is None or not seekable():
                data = stream.read()
                logger.debug("Buffered non-seekable %s: %d bytes", source_id, len(data))
                stream = io.BytesIO(data)
            return dispatcher.decode(ByteSource(stream), source_id)
        except UnformattedFileError as exc:
            raise exc.with_source(source_id)
        except OSError as exc:
            raise SourceError(str(exc), source_id=source_id) from exc

    @staticmethod
    def read_bytes(data: bytes, **decoder_options) -> RecordStore:
        """Decode an in-memory buffer."""
        source_id = "buffer"
        try:
            return FormatDispatcher(**decoder_options).decode(ByteSource.from_bytes(data), source_id)
        except UnformattedFileError as exc:
            raise exc.with_source(source_id)
