from typing import List, Optional
from fortran_unformatted.decoders.byte_source import ByteSource
from fortran_unformatted.decoders.unformatted_decoder_base import UnformattedDecoderBase
from fortran_unformatted.models.errors import StructureError
from fortran_unformatted.models.record import Record


class LongRecordDecoder(UnformattedDecoderBase):
    """
    Decoder for long physical records:

        int32 len | byte[len] data | int32 len

    Each physical record is one logical record. The whole source is always
    decoded from offset 0, and this decoder never falls back.
    """

    MARKER_SIZE = 4
    BYTEORDER = "little"

    def __init__(self, byteorder: Optional[str] = None):
        super().__init__()
        if byteorder is None:
            byteorder = self.BYTEORDER
        if byteorder not in ("little", "big"):
            raise ValueError(f"byteorder must be 'little' or 'big', got {byteorder!r}")
        self.byteorder = byteorder

    def decode(self, source: ByteSource) -> List[Record]:
        source.rewind()
        records: List[Record] = []
        length = source.length

        # A single stray byte at the end is tolerated
        while source.position < length - 1:
            block_offset = source.position

            if source.remaining < self.MARKER_SIZE:
                raise StructureError("unexpected end of file", byte_offset=source.position)
            bmark = self._read_marker(source)

            if bmark < 0:
                raise StructureError(
                    f"record {len(records)}: start marker out of range",
                    record_index=len(records),
                    byte_offset=block_offset,
                )
            if bmark + self.MARKER_SIZE > source.remaining:
                raise StructureError("unexpected end of file", byte_offset=source.position)

            record = Record(
                index=len(records),
                raw_data=source.read(bmark),
                block_offset=block_offset,
            )
            records.append(record)

            emark = self._read_marker(source)
            if emark != bmark:
                raise StructureError(
                    f"record {record.index}: end marker mismatch ({emark} != {bmark})",
                    record_index=record.index,
                    byte_offset=source.position - self.MARKER_SIZE,
                )
            self.logger.debug("Long record %d: offset=%d, length=%d", record.index, block_offset, bmark)

        return records

    def _read_marker(self, source: ByteSource) -> int:
        return int.from_bytes(source.read(self.MARKER_SIZE), byteorder=self.byteorder, signed=True)
