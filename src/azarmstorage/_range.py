# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See LICENSE in the project root for
# license information.
# --------------------------------------------------------------------------
import dataclasses
from typing import Optional, Tuple, Union

from azarmstorage.exceptions import InvalidArgumentError


BYTE_RANGE_TYPE = Union[Tuple[int, int], range]


@dataclasses.dataclass(frozen=True)
class RangeSpec:
    """A resolved inclusive byte span, or the entire object when unbounded."""

    start: Optional[int] = None
    end: Optional[int] = None

    def __post_init__(self):
        if (self.start is None) != (self.end is None):
            raise ValueError("start and end must either both be set or both be None")

    @classmethod
    def explicit(cls, start: int, end: int) -> "RangeSpec":
        return cls(start=start, end=end)

    @classmethod
    def entire_object(cls) -> "RangeSpec":
        return cls()

    @property
    def is_entire_object(self) -> bool:
        return self.start is None

    @property
    def header_value(self) -> Optional[str]:
        if self.is_entire_object:
            return None
        return f"bytes={self.start}-{self.end}"


def resolve_byte_range(
    byte_range: Optional[BYTE_RANGE_TYPE] = None,
    start_byte: Optional[int] = None,
    end_byte: Optional[int] = None,
    length: Optional[int] = None,
    entire_image: bool = False,
) -> RangeSpec:
    # Ordering of start and end and the sign of length are not validated. The
    # resulting range string is passed through for the service to accept or reject.
    if byte_range is not None:
        return RangeSpec.explicit(*_get_range_bounds(byte_range))
    if start_byte is not None and end_byte is not None:
        return RangeSpec.explicit(start_byte, end_byte)
    if start_byte is not None and length is not None:
        return RangeSpec.explicit(start_byte, start_byte + length - 1)
    if entire_image:
        return RangeSpec.entire_object()
    raise InvalidArgumentError("must specify byte range or entire_image flag")


def _get_range_bounds(byte_range: BYTE_RANGE_TYPE) -> Tuple[int, int]:
    if isinstance(byte_range, range):
        if not byte_range:
            raise InvalidArgumentError(f"byte range must not be empty: {byte_range}")
        first, last = byte_range[0], byte_range[-1]
        if byte_range.step < 0:
            return last, first
        return first, last
    start, end = byte_range
    return start, end
