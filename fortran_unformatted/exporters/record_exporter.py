import pandas as pd
import numpy as np
from fortran_unformatted.models.record_store import RecordStore


class RecordExporter:
    """
    Export a decoded RecordStore to pandas / numpy.

    The DataFrame holds one row per logical record with its layout in the
    source; payloads are exported as typed numpy arrays.
    """

    ALL_COLUMNS = [
        'INDEX',  # Zero-based logical record number
        'OFFSET',  # Offset of the first marker in the source
        'LENGTH',  # Payload length (bytes)
        'FRAGMENTS',  # Physical records in the logical record
        'FORMAT',  # short / long
    ]

    @staticmethod
    def records_to_dataframe(store: RecordStore) -> pd.DataFrame:
        # Build by columns to avoid a list of dicts
        columns = RecordExporter.ALL_COLUMNS
        data_cols = {col: [] for col in columns}
        fmt = store.format_mode.value

        for record in store.records:
            data_cols['INDEX'].append(record.index)
            data_cols['OFFSET'].append(record.block_offset)
            data_cols['LENGTH'].append(record.length)
            data_cols['FRAGMENTS'].append(record.fragments)
            data_cols['FORMAT'].append(fmt)

        df = pd.DataFrame(data_cols, columns=columns)
        return RecordExporter._downcast_dtypes(df)

    @staticmethod
    def _downcast_dtypes(df: pd.DataFrame) -> pd.DataFrame:
        if df is None or df.empty:
            return df

        for col in ['INDEX', 'LENGTH', 'FRAGMENTS']:
            df[col] = pd.to_numeric(df[col], downcast='unsigned')
        df['OFFSET'] = df['OFFSET'].astype('int64')
        df['FORMAT'] = df['FORMAT'].astype('category')
        return df

    @staticmethod
    def record_to_array(store: RecordStore, index: int, dtype="<f4") -> np.ndarray:
        """Payload of one record as a read-only typed array."""
        return store.record(index).as_array(dtype)

    @staticmethod
    def records_to_matrix(store: RecordStore, dtype="<f4") -> np.ndarray:
        """
        Stack all records into a 2-D array (one row per record).
        Every record must hold the same number of items.
        """
        dtype = np.dtype(dtype)
        if len(store) == 0:
            return np.empty((0, 0), dtype=dtype)

        lengths = {record.length for record in store.records}
        if len(lengths) != 1:
            raise ValueError(f"records have different lengths: {sorted(lengths)}")

        return np.vstack([record.as_array(dtype) for record in store.records])

    @staticmethod
    def export_to_csv(df: pd.DataFrame, output_path: str, na_rep: str = 'N/A') -> None:
        df.to_csv(output_path, index=False, na_rep=na_rep)
        print(f"✅ Exported {len(df):,} records to {output_path}")

    @staticmethod
    def get_column_info() -> dict:
        return {
            'INDEX': 'Logical record number (from 0; Fortran counts from 1)',
            'OFFSET': 'Byte offset of the first length marker in the source',
            'LENGTH': 'Payload length (bytes)',
            'FRAGMENTS': 'Number of physical records (always 1 for long records)',
            'FORMAT': 'Record encoding (short/long)',
        }
