from .binary_decoder import BinaryDecoder
from .binary_encoder import BinaryEncoder

__all__ = ["BinaryDecoder", "BinaryEncoder"]
