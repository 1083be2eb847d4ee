"""JSON encoding backend.

``msgspec`` is used when it is installed (``pip install sqldal[msgspec]``); the standard library :mod:`json`
module is used otherwise. Both produce compact output and encode dates and times in ISO 8601 form.
"""

import json
from importlib.util import find_spec
from typing import Any, Final, Union

__all__ = ("MSGSPEC_INSTALLED", "decode_json", "encode_json")

MSGSPEC_INSTALLED: Final[bool] = find_spec("msgspec") is not None


def _default(value: Any) -> Any:
    isoformat = getattr(value, "isoformat", None)
    return isoformat() if callable(isoformat) else str(value)


if MSGSPEC_INSTALLED:
    import msgspec

    def encode_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
        encoded = msgspec.json.encode(data, enc_hook=_default)
        return encoded if as_bytes else encoded.decode("utf-8")

    def decode_json(data: Union[str, bytes]) -> Any:
        try:
            return msgspec.json.decode(data)
        except msgspec.DecodeError as e:
            raise ValueError(str(e)) from e

else:

    def encode_json(data: Any, *, as_bytes: bool = False) -> Union[str, bytes]:
        encoded = json.dumps(data, default=_default, separators=(",", ":"))
        return encoded.encode("utf-8") if as_bytes else encoded

    def decode_json(data: Union[str, bytes]) -> Any:
        return json.loads(data)
