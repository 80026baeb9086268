from fortran_unformatted.decoders.unformatted_file_reader import UnformattedFileReader
from fortran_unformatted.models.record_store import RecordStore
from typing import Dict, Iterable, Iterator, Tuple
import logging

logger = logging.getLogger(__name__)


def decode_files(paths: Iterable[str], **decoder_options) -> Dict[str, RecordStore]:
    """
    Decode several files with the same decoder options.

    The first failing file aborts the batch; its error carries the file path.
    """
    return dict(decode_files_iter(paths, **decoder_options))


def decode_files_iter(paths: Iterable[str], **decoder_options) -> Iterator[Tuple[str, RecordStore]]:
    """
    Decode files lazily and yield (path, store) pairs one by one.
    Only one decoded file needs to be held at a time.
    """
    for path in paths:
        store = UnformattedFileReader(str(path), **decoder_options).read_store()
        logger.info("%s: %d %s records", path, len(store), store.format_mode.value)
        yield str(path), store
