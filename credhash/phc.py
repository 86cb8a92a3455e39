"""PHC string format codec.

Digests look like::

    $argon2id$v=19$m=65536,t=3,p=4$<salt>$<hash>

with an optional ``data=<b64>`` parameter after ``p``. Binary fields use the
standard base64 alphabet without padding.
"""

import base64
import binascii
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Union

from credhash.exceptions import ParseError
from credhash.params import Variant

ParamValue = Union[int, str, bytes]

# Parameters whose values are base64 rather than text
BINARY_PARAMS = frozenset({"data"})

_ID_RE = re.compile(r"^[a-z0-9-]{1,32}$")
_NAME_RE = re.compile(r"^[a-z0-9-]{1,32}$")
_VALUE_RE = re.compile(r"^[a-zA-Z0-9/+.-]+$")
_VERSION_RE = re.compile(r"^v=(0|[1-9][0-9]*)$")
_DECIMAL_RE = re.compile(r"^(0|[1-9][0-9]*)$")
_B64_RE = re.compile(r"^[A-Za-z0-9+/]*$")


@dataclass(frozen=True)
class Digest:
    """Structured form of a PHC string."""
    id: str
    version: Optional[int]
    params: Mapping[str, ParamValue] = field(default_factory=dict)
    salt: bytes = b""
    hash: bytes = b""

    def __post_init__(self):
        # Read-only copy so a decoded digest cannot be changed in place
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def __hash__(self):
        return hash((self.id, self.version, tuple(self.params.items()), self.salt, self.hash))

    @property
    def variant(self) -> "Optional[Variant]":
        """The Argon2 variant named by ``id``, or None for a foreign scheme."""
        return Variant.from_name(self.id)


def b64encode(data: bytes) -> str:
    """Encode bytes as unpadded standard base64."""
    return base64.b64encode(data).decode("ascii").rstrip("=")


def b64decode(text: str) -> bytes:
    """Decode unpadded standard base64.

    Raises:
        ParseError: If ``text`` is padded, not base64, or not canonical.
    """
    if not _B64_RE.match(text) or len(text) % 4 == 1:
        raise ParseError(f"Invalid base64 value: {text!r}")
    try:
        data = base64.b64decode(text + "=" * (-len(text) % 4), validate=True)
    except binascii.Error as e:
        raise ParseError(f"Invalid base64 value: {text!r}") from e

    # Unused trailing bits must be zero
    if b64encode(data) != text:
        raise ParseError(f"Non-canonical base64 value: {text!r}")
    return data


def _encode_value(value: ParamValue) -> str:
    if isinstance(value, bytes):
        return b64encode(value)
    if isinstance(value, bool):
        raise TypeError("Boolean parameter values are not supported")
    return str(value)


def encode(digest: Digest) -> str:
    """Serialize a Digest to its PHC string.

    Raises:
        ValueError: If the id or a parameter name/value cannot be represented.
    """
    if not _ID_RE.match(digest.id):
        raise ValueError(f"Invalid digest id: {digest.id!r}")

    fields = ["", digest.id]
    if digest.version is not None:
        fields.append(f"v={int(digest.version)}")

    pairs = []
    for name, value in digest.params.items():
        if not _NAME_RE.match(name):
            raise ValueError(f"Invalid parameter name: {name!r}")
        text = _encode_value(value)
        if not _VALUE_RE.match(text) and not (name in BINARY_PARAMS and text == ""):
            raise ValueError(f"Invalid value for parameter {name!r}")
        pairs.append(f"{name}={text}")
    if not pairs:
        raise ValueError("Digest must carry at least one parameter")

    fields.append(",".join(pairs))
    fields.append(b64encode(digest.salt))
    fields.append(b64encode(digest.hash))
    return "$".join(fields)


def _decode_params(block: str) -> Dict[str, ParamValue]:
    if not block:
        raise ParseError("Missing parameter block")

    params: Dict[str, ParamValue] = {}
    for pair in block.split(","):
        name, sep, text = pair.partition("=")
        if not sep or not _NAME_RE.match(name):
            raise ParseError(f"Malformed parameter: {pair!r}")
        if name in params:
            raise ParseError(f"Duplicate parameter: {name!r}")

        if name in BINARY_PARAMS:
            params[name] = b64decode(text)
        elif not _VALUE_RE.match(text):
            raise ParseError(f"Malformed value for parameter {name!r}")
        elif _DECIMAL_RE.match(text):
            params[name] = int(text)
        else:
            params[name] = text
    return params


def decode(text: str) -> Digest:
    """Parse a PHC string into a Digest.

    The parse is purely structural: a well-formed digest with an id that is
    not an Argon2 variant still decodes.

    Raises:
        ParseError: If the string is not a well-formed PHC digest.
    """
    if not isinstance(text, str):
        raise ParseError(f"Digest must be a string, got {type(text).__name__}")

    fields = text.split("$")
    if fields[0] != "" or len(fields) not in (5, 6):
        raise ParseError("Digest does not have the $id[$v=N]$params$salt$hash shape")

    digest_id = fields[1]
    if not _ID_RE.match(digest_id):
        raise ParseError(f"Invalid digest id: {digest_id!r}")

    version = None
    if len(fields) == 6:
        match = _VERSION_RE.match(fields[2])
        if not match:
            raise ParseError(f"Invalid version field: {fields[2]!r}")
        version = int(match.group(1))

    params_block, salt, hash_ = fields[-3:]
    return Digest(
        id=digest_id,
        version=version,
        params=_decode_params(params_block),
        salt=b64decode(salt),
        hash=b64decode(hash_),
    )
