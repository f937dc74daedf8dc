"""Value codec: typed values to/from their string form on the wire."""
from callwire.codec.json_codec import JsonCodec
from callwire.codec.protocol import Codec

__all__ = ["Codec", "JsonCodec"]
