import logging
from typing import Optional
from fortran_unformatted.decoders.byte_source import ByteSource
from fortran_unformatted.decoders.long_record_decoder import LongRecordDecoder
from fortran_unformatted.decoders.short_record_decoder import ShortRecordDecoder
from fortran_unformatted.models.errors import SourceError, StructureError
from fortran_unformatted.models.record_store import RecordStore
from fortran_unformatted.types.enums import FormatMode, ShortMarker


class FormatDispatcher:
    """
    Picks the record encoding and runs the matching decoder.

    A file starting with 0x4B is tried as short records first. Any violation
    of the short grammar discards what was decoded so far and the whole
    source is decoded again as long records (one shot; errors from the long
    decoder propagate). With allow_fallback=False the short-grammar
    violation is raised as a StructureError instead.
    """

    ALLOW_FALLBACK = True

    def __init__(self, allow_fallback: Optional[bool] = None,
                 byteorder: Optional[str] = None):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.allow_fallback = self.ALLOW_FALLBACK if allow_fallback is None else allow_fallback
        self.short_decoder = ShortRecordDecoder()
        self.long_decoder = LongRecordDecoder(byteorder=byteorder)

    def detect(self, source: ByteSource) -> FormatMode:
        """Initial guess from the first byte; the short guess may still fall back."""
        source.rewind()
        first = source.read_byte()
        source.rewind()
        if first == -1:
            raise SourceError("source is empty")
        if first == ShortMarker.BOF:
            return FormatMode.SHORT_RECORD
        return FormatMode.LONG_RECORD

    def decode(self, source: ByteSource, source_id: Optional[str] = None) -> RecordStore:
        if self.detect(source) == FormatMode.SHORT_RECORD:
            outcome = self.short_decoder.decode(source)
            if outcome.completed:
                self.logger.info("Decoded %d short records", len(outcome.records))
                return RecordStore(outcome.records, FormatMode.SHORT_RECORD, source_id)

            if not self.allow_fallback:
                raise StructureError(
                    f"short record structure violated: {outcome.reason}",
                    record_index=outcome.record_index,
                    byte_offset=outcome.byte_offset,
                )
            self.logger.info("Short record grammar violated at offset %d (%s); "
                             "decoding as long records", outcome.byte_offset, outcome.reason)

        records = self.long_decoder.decode(source)
        self.logger.info("Decoded %d long records", len(records))
        return RecordStore(records, FormatMode.LONG_RECORD, source_id)
