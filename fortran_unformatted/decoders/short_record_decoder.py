"""
Short physical records:

    byte len | byte[min(len, 128)] data | byte len

len == 129 means a 128-byte fragment whose logical record continues in the
next physical record. The file is wrapped in BOF (0x4B) ... EOF (0x82).
"""
from dataclasses import dataclass, field
from typing import List, Optional
from fortran_unformatted.decoders.byte_source import ByteSource
from fortran_unformatted.decoders.unformatted_decoder_base import UnformattedDecoderBase
from fortran_unformatted.models.errors import StructureError
from fortran_unformatted.models.record import Record
from fortran_unformatted.types.enums import DecodeStatus, ShortMarker


@dataclass
class ShortDecodeOutcome:
    """Result of a short-record attempt; records are scratch until COMPLETED."""
    status: DecodeStatus
    records: List[Record] = field(default_factory=list)
    reason: Optional[str] = None
    record_index: Optional[int] = None
    byte_offset: Optional[int] = None

    @property
    def completed(self) -> bool:
        return self.status == DecodeStatus.COMPLETED


class ShortRecordDecoder(UnformattedDecoderBase):

    def decode(self, source: ByteSource) -> ShortDecodeOutcome:
        source.rewind()
        if source.read_byte() != ShortMarker.BOF:
            return self._fallback("missing begin marker", 0, 0)

        records: List[Record] = []
        accumulator = bytearray()
        fragments = 0
        block_offset = source.position

        while True:
            marker_offset = source.position
            bmark = source.read_byte()
            if bmark == ShortMarker.EOF:
                break
            if bmark > ShortMarker.CONTINUATION:
                return self._fallback(f"invalid length byte 0x{bmark:02X}", len(records), marker_offset)
            if bmark == -1:
                return self._fallback("end of data before end marker", len(records), marker_offset)
            if bmark > source.remaining:
                return self._fallback("fragment runs past end of data", len(records), marker_offset)

            payload = source.read(min(bmark, ShortMarker.MAX_LENGTH))
            emark = source.read_byte()
            if emark == -1:
                return self._fallback("end of data inside fragment", len(records), source.position)
            if emark != bmark:
                return self._fallback(
                    f"end marker {emark} does not match start marker {bmark}",
                    len(records), source.position - 1,
                )

            if not fragments:
                block_offset = marker_offset
            accumulator += payload
            fragments += 1

            if bmark != ShortMarker.CONTINUATION:
                records.append(Record(
                    index=len(records),
                    raw_data=bytes(accumulator),
                    block_offset=block_offset,
                    fragments=fragments,
                ))
                self.logger.debug("Short record %d: offset=%d, length=%d, fragments=%d",
                                  len(records) - 1, block_offset, len(accumulator), fragments)
                accumulator.clear()
                fragments = 0

        if source.remaining > 0:
            raise StructureError("trailing data after end marker", byte_offset=source.position)

        return ShortDecodeOutcome(status=DecodeStatus.COMPLETED, records=records)

    def _fallback(self, reason: str, record_index: int, byte_offset: int) -> ShortDecodeOutcome:
        self.logger.debug("Short record grammar violated at offset %d (record %d): %s",
                          byte_offset, record_index, reason)
        return ShortDecodeOutcome(
            status=DecodeStatus.FALLBACK_REQUESTED,
            reason=reason,
            record_index=record_index,
            byte_offset=byte_offset,
        )
