import json
from collections.abc import Mapping
from io import BytesIO
from typing import Any

import numpy as np
from zstandard import ZstdCompressor, ZstdDecompressor


def _encode_numpy(value: Any) -> Any:  # noqa: ANN401
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def to_bytes(data: Mapping[str, Any], level: int = 6) -> bytes:
    """Serialize a JSON-compatible mapping to zstd-compressed bytes.

    Parameters
    ----------
    data : Mapping[str, Any]
        A Mapping of JSON-compatible values. NumPy arrays and scalars are converted to
        lists and python scalars.
    level : int, optional
        The compression level for zstd (default is 6).
    """
    raw = json.dumps(data, default=_encode_numpy, separators=(",", ":"))
    return ZstdCompressor(level=level).compress(raw.encode("utf-8"))


def load_bytes(byte_data: bytes) -> dict[str, Any]:
    """Deserialize zstd-compressed bytes back into a dictionary."""
    with ZstdDecompressor().stream_reader(BytesIO(byte_data)) as reader:
        raw = reader.read()
    data = json.loads(raw.decode("utf-8"))
    if not isinstance(data, dict):
        msg = f"Expected a serialized mapping, got {type(data).__name__}"
        raise TypeError(msg)
    return data
