import sys
import time
import logging
import pandas as pd
from pathlib import Path

from fortran_unformatted.decoders.unformatted_file_reader import UnformattedFileReader
from fortran_unformatted.exporters.record_exporter import RecordExporter
from fortran_unformatted.models.errors import UnformattedFileError


def main():
    # ============================================================
    # LOGGING CONFIGURATION
    # ============================================================
    LOG_LEVEL = logging.INFO  # DEBUG, INFO, WARNING, ERROR, CRITICAL

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("fortran_unformatted").setLevel(LOG_LEVEL)

    # ============================================================
    # PATHS
    # ============================================================
    if len(sys.argv) < 2:
        print("usage: python -m fortran_unformatted.main <file> [output.csv]")
        return 2

    input_file = Path(sys.argv[1])
    output_csv = Path(sys.argv[2]) if len(sys.argv) > 2 else input_file.with_suffix(".records.csv")

    print(f"\n{'=' * 60}")
    print("Fortran Unformatted Sequential Reader")
    print(f"{'=' * 60}")
    print(f"Input file: {input_file}")
    print(f"{'=' * 60}\n")

    # ============================================================
    # STEP 1: READ & DECODE
    # ============================================================
    print("📖 Step 1: Reading and decoding records...")

    start_time = time.perf_counter()
    try:
        store = UnformattedFileReader(str(input_file)).read_store()
    except (UnformattedFileError, FileNotFoundError) as exc:
        print(f"   ❌ {exc}")
        return 1
    elapsed_time = time.perf_counter() - start_time

    print(f"   ✅ Decoded {len(store):,} {store.format_mode.value} records in {elapsed_time:.4f}s")
    print(f"   📊 Payload: {store.total_bytes:,} bytes")

    # ============================================================
    # STEP 2: RECORD TABLE
    # ============================================================
    print("\n📋 Step 2: Converting to DataFrame...")

    df = RecordExporter.records_to_dataframe(store)
    if not df.empty:
        pd.set_option('display.width', 120)
        print(df.head(10))

    # ============================================================
    # STEP 3: EXPORT TO CSV
    # ============================================================
    RecordExporter.export_to_csv(df, str(output_csv))
    return 0


if __name__ == "__main__":
    sys.exit(main())
