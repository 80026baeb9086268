# tests/test_format_dispatcher.py
import logging
import pytest
from fortran_unformatted.decoders.byte_source import ByteSource
from fortran_unformatted.decoders.format_dispatcher import FormatDispatcher
from fortran_unformatted.decoders.long_record_decoder import LongRecordDecoder
from fortran_unformatted.decoders.unformatted_file_reader import UnformattedFileReader
from fortran_unformatted.models.errors import SourceError, StructureError
from fortran_unformatted.types.enums import FormatMode


# Third record has end marker 3 for a 2-byte fragment
CORRUPT_THIRD_RECORD = b'\x4B\x01A\x01\x01B\x01\x02CD\x03\x82'


class TestFormatDispatcher:
    @pytest.fixture
    def dispatcher(self):
        return FormatDispatcher()

    @pytest.mark.parametrize(
        "data,mode",
        [
            (b'\x4B\x82', FormatMode.SHORT_RECORD),
            (b'\x02\x00\x00\x00\xAA\xBB\x02\x00\x00\x00', FormatMode.LONG_RECORD),
            (b'\x00', FormatMode.LONG_RECORD),
        ]
    )
    def test_detect(self, dispatcher, data, mode):
        source = ByteSource.from_bytes(data)

        assert dispatcher.detect(source) == mode
        assert source.position == 0

    def test_short_file(self, dispatcher):
        store = dispatcher.decode(ByteSource.from_bytes(b'\x4B\x03\x41\x42\x43\x03\x82'))

        assert store.format_mode == FormatMode.SHORT_RECORD
        assert not store.long_records
        assert len(store) == 1
        assert bytes(store[0]) == b'\x41\x42\x43'

    def test_long_file(self, dispatcher):
        store = dispatcher.decode(ByteSource.from_bytes(b'\x02\x00\x00\x00\xAA\xBB\x02\x00\x00\x00'))

        assert store.format_mode == FormatMode.LONG_RECORD
        assert store.long_records
        assert len(store) == 1
        assert bytes(store[0]) == b'\xAA\xBB'

    def test_invalid_long_file_raises(self, dispatcher):
        with pytest.raises(StructureError):
            dispatcher.decode(ByteSource.from_bytes(b'\x05\x00\x00\x00\x01\x02'))

    def test_empty_source(self, dispatcher):
        with pytest.raises(SourceError) as excinfo:
            dispatcher.decode(ByteSource.from_bytes(b''))

        assert "source is empty" in str(excinfo.value)

    def test_long_file_starting_with_begin_marker_falls_back(self, dispatcher, encode_long, caplog):
        """A 75-byte long record starts with 0x4B and first looks like short records"""
        payloads = [b'\xFF' * 75, b'tail']
        data = encode_long(payloads)
        assert data[0] == 0x4B

        caplog.set_level(logging.INFO, logger="fortran_unformatted")
        store = dispatcher.decode(ByteSource.from_bytes(data))

        assert store.format_mode == FormatMode.LONG_RECORD
        assert [bytes(view) for view in store] == payloads
        assert "decoding as long records" in caplog.text

    def test_fallback_failure_propagates(self, dispatcher):
        """Short grammar breaks at record 2, the long decode of the same bytes fails too"""
        with pytest.raises(StructureError) as excinfo:
            dispatcher.decode(ByteSource.from_bytes(CORRUPT_THIRD_RECORD))

        # The error comes from the long decoder
        assert "unexpected end of file" in str(excinfo.value)

    def test_strict_mode_reports_short_violation(self):
        dispatcher = FormatDispatcher(allow_fallback=False)

        with pytest.raises(StructureError) as excinfo:
            dispatcher.decode(ByteSource.from_bytes(CORRUPT_THIRD_RECORD))

        assert "short record structure violated" in str(excinfo.value)
        assert excinfo.value.record_index == 2
        assert excinfo.value.byte_offset == 10

    def test_trailing_data_is_not_a_fallback(self, dispatcher):
        with pytest.raises(StructureError) as excinfo:
            dispatcher.decode(ByteSource.from_bytes(b'\x4B\x03ABC\x03\x82\x00'))

        assert "trailing data" in str(excinfo.value)
        assert excinfo.value.record_index is None

    def test_class_default_fallback_is_read_at_construction(self, monkeypatch):
        """Changing ALLOW_FALLBACK on the class switches the reader entry points to strict mode"""
        monkeypatch.setattr(FormatDispatcher, "ALLOW_FALLBACK", False)

        with pytest.raises(StructureError) as excinfo:
            UnformattedFileReader.read_bytes(CORRUPT_THIRD_RECORD)

        assert "short record structure violated" in str(excinfo.value)
        assert excinfo.value.record_index == 2

    def test_explicit_fallback_overrides_class_default(self, monkeypatch):
        monkeypatch.setattr(FormatDispatcher, "ALLOW_FALLBACK", False)

        assert FormatDispatcher(allow_fallback=True).allow_fallback is True

    def test_subclass_default_fallback(self):
        class StrictDispatcher(FormatDispatcher):
            ALLOW_FALLBACK = False

        with pytest.raises(StructureError) as excinfo:
            StrictDispatcher().decode(ByteSource.from_bytes(CORRUPT_THIRD_RECORD))

        assert excinfo.value.byte_offset == 10

    def test_class_default_byteorder(self, monkeypatch, encode_long):
        monkeypatch.setattr(LongRecordDecoder, "BYTEORDER", "big")
        dispatcher = FormatDispatcher()

        store = dispatcher.decode(ByteSource.from_bytes(encode_long([b'\xAA\xBB'], byteorder="big")))

        assert dispatcher.long_decoder.byteorder == "big"
        assert bytes(store[0]) == b'\xAA\xBB'

    def test_source_id_on_store(self, dispatcher):
        store = dispatcher.decode(ByteSource.from_bytes(b'\x4B\x82'), source_id="unit")

        assert store.source_id == "unit"
        assert len(store) == 0


class TestRoundTrip:
    @pytest.mark.parametrize("count", [0, 1, 3, 10])
    @pytest.mark.parametrize("size", [0, 1, 127, 128, 129, 256, 300, 4096])
    def test_short_round_trip(self, encode_short, make_payloads, count, size):
        payloads = make_payloads(count, size)

        store = FormatDispatcher().decode(ByteSource.from_bytes(encode_short(payloads)))

        assert store.format_mode == FormatMode.SHORT_RECORD
        assert [bytes(view) for view in store] == payloads

    @pytest.mark.parametrize("count", [1, 3, 10])
    @pytest.mark.parametrize("size", [0, 1, 127, 128, 129, 256, 300, 4096])
    def test_long_round_trip(self, encode_long, make_payloads, count, size):
        payloads = make_payloads(count, size)

        store = FormatDispatcher().decode(ByteSource.from_bytes(encode_long(payloads)))

        assert store.format_mode == FormatMode.LONG_RECORD
        assert [bytes(view) for view in store] == payloads

    def test_mixed_sizes(self, encode_short, make_payloads):
        payloads = [p for size in (5, 128, 700, 0, 129) for p in make_payloads(1, size, seed=size)]

        store = FormatDispatcher().decode(ByteSource.from_bytes(encode_short(payloads)))

        assert [bytes(store[i]) for i in range(len(store))] == payloads
        assert [bytes(view) for view in store] == payloads


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
