from collections.abc import Sequence
from typing import Iterable, Iterator, List, Optional, Tuple, Union
from fortran_unformatted.models.record import Record
from fortran_unformatted.types.enums import FormatMode


class RecordStore(Sequence):
    """
    Decoded contents of a Fortran unformatted file.

    Built once by the decoders and read-only afterwards. Indexing and
    iteration hand out fresh read-only memoryviews; the Record objects
    (with offsets and fragment counts) are reachable via record()/records.
    """

    def __init__(self, records: Iterable[Record], format_mode: FormatMode,
                 source_id: Optional[str] = None):
        self._records: Tuple[Record, ...] = tuple(records)
        self._format_mode = format_mode
        self._source_id = source_id

    @property
    def format_mode(self) -> FormatMode:
        return self._format_mode

    @property
    def long_records(self) -> bool:
        """True when the file used 4-byte length markers."""
        return self._format_mode == FormatMode.LONG_RECORD

    @property
    def source_id(self) -> Optional[str]:
        return self._source_id

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    @property
    def total_bytes(self) -> int:
        return sum(record.length for record in self._records)

    def record(self, index: int) -> Record:
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __getitem__(self, index: Union[int, slice]) -> Union[memoryview, List[memoryview]]:
        if isinstance(index, slice):
            return [record.view() for record in self._records[index]]
        try:
            return self._records[index].view()
        except IndexError:
            raise IndexError(f"record index {index} out of range (count={len(self._records)})") from None

    def __iter__(self) -> Iterator[memoryview]:
        for record in self._records:
            yield record.view()

    def __repr__(self) -> str:
        return (f"RecordStore(count={len(self._records)}, format={self._format_mode.value}, "
                f"source={self._source_id!r})")
