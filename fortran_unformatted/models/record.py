from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class Record:
    """One logical record of a Fortran unformatted file."""
    index: int  # Zero-based position in the file
    raw_data: bytes
    block_offset: int  # Offset of the record's first marker in the source
    fragments: int = 1  # Physical records it was assembled from

    @property
    def length(self) -> int:
        return len(self.raw_data)

    def view(self) -> memoryview:
        """Fresh read-only view over the record bytes."""
        return memoryview(self.raw_data)

    def as_array(self, dtype="<f4", count: int = -1, offset: int = 0) -> np.ndarray:
        """
        Interpret the payload as a typed array.

        The array borrows the record bytes and is read-only.
        Raises ValueError if the payload size is not a multiple of the item size.
        """
        return np.frombuffer(self.raw_data, dtype=np.dtype(dtype), count=count, offset=offset)
