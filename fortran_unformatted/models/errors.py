from typing import Optional


class UnformattedFileError(Exception):
    """
    Base error raised while reading a Fortran unformatted file.

    Diagnostics are optional and only present when they are known at the
    point of detection:
    - record_index: zero-based logical record being produced (Fortran counts from 1)
    - byte_offset: position in the source where the problem was detected
    - source_id: file path or stream identifier, attached by the reader
    """

    def __init__(self, message: str, *, record_index: Optional[int] = None,
                 byte_offset: Optional[int] = None, source_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.record_index = record_index
        self.byte_offset = byte_offset
        self.source_id = source_id

    def with_source(self, source_id: str) -> "UnformattedFileError":
        """Attach the source identifier unless one is already set."""
        if self.source_id is None:
            self.source_id = source_id
        return self

    def __str__(self) -> str:
        details = []
        if self.record_index is not None:
            details.append(f"record={self.record_index}")
        if self.byte_offset is not None:
            details.append(f"offset={self.byte_offset}")
        if self.source_id is not None:
            details.append(f"source={self.source_id}")
        if not details:
            return self.message
        return f"{self.message} ({', '.join(details)})"


class SourceError(UnformattedFileError):
    """The data source cannot be used: unreadable, not seekable, empty or failing I/O."""


class StructureError(UnformattedFileError):
    """The data violates the short or long record grammar."""
