from abc import ABC, abstractmethod
import logging
from fortran_unformatted.decoders.byte_source import ByteSource


class UnformattedDecoderBase(ABC):
    def __init__(self) -> None:
        # Initialize a per-instance logger; subclasses should call super().__init__()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    def decode(self, source: ByteSource):
        pass
