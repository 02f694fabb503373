"""Bit accessors over a single byte or a byte sequence.

A byte sequence is read as one big-endian bit vector: the *last* element
holds bits 0..7, the element before it holds bits 8..15, and so on, so
element 0 is the most significant byte.  Global bit ``i`` of a sequence
lives in element ``len(sequence) - 1 - i // 8`` at bit ``i % 8``.

Every function dispatches on its second argument.  An integer (``int`` or
a numpy integer scalar) is a single byte, anything else is a byte
sequence (``bytes``, ``bytearray``, ``memoryview``, a list of ints or a
1-D numpy ``uint8`` array).  Single bytes are returned as new values,
sequences are modified in place and never copied.

Indices are checked: a bit index outside the byte or the vector raises
:class:`IndexError`, a byte value outside ``0..255`` raises
:class:`ValueError`.
"""

from __future__ import annotations

from typing import MutableSequence, Optional, Sequence, Tuple

import numpy as np


__all__ = [
    "BIT_MASKS",
    "DEFAULT_SEPARATOR",
    "DEFAULT_GROUP_SEPARATOR",
    "DEFAULT_GROUP_SIZE",
    "is_set",
    "set_bit",
    "clear_bit",
    "clear_all",
    "render",
    "to_bits",
    "from_bits",
]


# Mask for each bit of a byte, indexed by bit position (0 is least significant).
BIT_MASKS = (1, 2, 4, 8, 16, 32, 64, 128)

# Separators used by "render" when none are given.
DEFAULT_SEPARATOR = ","
DEFAULT_GROUP_SEPARATOR = "\n"
DEFAULT_GROUP_SIZE = 8


# ------------------------------------------------------------------
# Argument checks
# ------------------------------------------------------------------

# Return True when "value" should be treated as a single byte.
def _is_byte(value) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


# Verify that "i" is an integer bit index in [0, limit), return it as an int.
def _check_index(i, limit: int) -> int:
    if (isinstance(i, bool) or not isinstance(i, (int, np.integer))):
        raise TypeError(f"bit index must be an integer, received {type(i).__name__}")
    if not (0 <= i < limit):
        raise IndexError(f"bit index {i} out of range [0, {limit})")
    return int(i)


# Verify that "b" is a byte value in [0, 255], return it as an int.
def _check_byte(b) -> int:
    if (not _is_byte(b)):
        raise TypeError(f"byte must be an integer, received {type(b).__name__}")
    if not (0 <= b <= 255):
        raise ValueError(f"byte value {b} out of range [0, 255]")
    return int(b)


# A memoryview must expose single bytes, otherwise its length and
# elements disagree with its raw buffer.
def _check_view(sequence) -> None:
    if isinstance(sequence, memoryview) and (sequence.format != "B"):
        raise TypeError(f"memoryview must have format 'B', received {repr(sequence.format)}")


# Map global bit "i" of "sequence" to (element index, bit index within element).
def _locate(i, sequence: Sequence[int]) -> Tuple[int, int]:
    _check_view(sequence)
    length = len(sequence)
    i = _check_index(i, 8 * length)
    return length - 1 - i // 8, i % 8


# View (or convert) a byte sequence as a flat numpy uint8 array, element order kept.
def _as_uint8(sequence) -> np.ndarray:
    _check_view(sequence)
    if (len(sequence) == 0):
        return np.zeros((0,), dtype=np.uint8)
    if isinstance(sequence, (bytes, bytearray, memoryview)):
        return np.frombuffer(sequence, dtype=np.uint8)
    array = np.asarray(sequence)
    if (array.ndim != 1):
        raise ValueError(f"byte sequence must be one dimensional, received shape {array.shape}")
    if (not np.issubdtype(array.dtype, np.integer)):
        raise TypeError(f"byte sequence must hold integers, received dtype {array.dtype}")
    if (array.min() < 0) or (array.max() > 255):
        raise ValueError(f"byte sequence holds values in [{array.min()}, {array.max()}], outside [0, 255]")
    return array.astype(np.uint8, copy=False)


# ------------------------------------------------------------------
# Bit access
# ------------------------------------------------------------------

def is_set(i, value) -> bool:
    """Return True when bit ``i`` of ``value`` is 1.

    For a single byte ``i`` is in ``0..7``.  For a sequence ``i`` is a
    global bit index in ``0 .. 8*len(value)-1``.
    """
    if _is_byte(value):
        return (BIT_MASKS[_check_index(i, 8)] & _check_byte(value)) != 0
    index, bit = _locate(i, value)
    return is_set(bit, _check_byte(value[index]))


def set_bit(i, value) -> Optional[int]:
    """Force bit ``i`` of ``value`` to 1.

    A single byte is returned as a new byte with only bit ``i`` changed.
    A sequence is modified in place and ``None`` is returned.
    """
    if _is_byte(value):
        return BIT_MASKS[_check_index(i, 8)] | _check_byte(value)
    index, bit = _locate(i, value)
    value[index] = set_bit(bit, _check_byte(value[index]))


def clear_bit(i, value):
    """Force bit ``i`` of ``value`` to 0.

    A single byte is returned as a new byte with only bit ``i`` changed.
    A sequence is modified in place and the return value tells whether
    the element actually changed, i.e. whether the bit was 1 before.
    """
    if _is_byte(value):
        return ~BIT_MASKS[_check_index(i, 8)] & _check_byte(value)
    index, bit = _locate(i, value)
    before = _check_byte(value[index])
    after = clear_bit(bit, before)
    value[index] = after
    return before != after


# Set every byte of "sequence" to 0, in place. A single byte has no
# counterpart here, just use 0.
def clear_all(sequence: MutableSequence[int]) -> None:
    if _is_byte(sequence):
        raise TypeError("clear_all requires a byte sequence, received a single byte")
    for index in range(len(sequence)):
        sequence[index] = 0


# ------------------------------------------------------------------
# Rendering
# ------------------------------------------------------------------

def render(value, sep: Optional[str] = None, group_sep: Optional[str] = None,
           group_size: Optional[int] = None) -> str:
    """Render ``value`` as a string of ``'0'`` and ``'1'``, most significant bit first.

    A single byte renders as exactly 8 characters and takes no separators.

    A sequence renders its whole bit vector from the highest global bit
    down to bit 0.  Between bytes ``sep`` is inserted, except at every
    ``group_size`` bytes (counted from the least significant end) where
    ``group_sep`` is inserted instead.  Nothing follows the last bit.

    Parameters
    ----------
    sep:
        Separator between bytes.  When no formatting argument is given at
        all, the defaults ``","``, ``"\\n"`` and ``8`` are used.
    group_sep:
        Separator between groups of ``group_size`` bytes.
    group_size:
        Bytes per group, ``0`` disables grouping.  Defaults to ``0`` when
        only ``sep`` is given and to :data:`DEFAULT_GROUP_SIZE` when
        ``group_sep`` is given.
    """
    if _is_byte(value):
        if (sep is not None) or (group_sep is not None) or (group_size is not None):
            raise TypeError("separators only apply when rendering a byte sequence")
        byte = _check_byte(value)
        return "".join("1" if (BIT_MASKS[i] & byte) else "0" for i in range(7, -1, -1))
    # Resolve the formatting arguments.
    if (sep is None) and (group_sep is None) and (group_size is None):
        group_sep, group_size = DEFAULT_GROUP_SEPARATOR, DEFAULT_GROUP_SIZE
    if (sep is None):
        sep = DEFAULT_SEPARATOR
    if (group_size is None):
        group_size = DEFAULT_GROUP_SIZE if (group_sep is not None) else 0
    if (group_size < 0):
        raise ValueError(f"group_size must be nonnegative, received {group_size}")
    if (group_size > 0) and (group_sep is None):
        raise ValueError(f"group_sep is required when group_size={group_size}")
    # Produce all the bits in one pass, element 0 (most significant) first.
    array = _as_uint8(value)
    text = (np.unpackbits(array) + ord("0")).astype(np.uint8).tobytes().decode("ascii")
    length = len(array)
    pieces = []
    for index in range(length):
        pieces.append(text[8*index:8*(index+1)])
        # Number of bytes still to come, a boundary at global bit 8*remaining.
        remaining = length - 1 - index
        if (remaining == 0):
            break
        elif (group_size > 0) and (remaining % group_size == 0):
            pieces.append(group_sep)
        else:
            pieces.append(sep)
    return "".join(pieces)


# ------------------------------------------------------------------
# Numpy views of the bit vector
# ------------------------------------------------------------------

# Return the bit vector of "sequence" as a boolean array where
# element "i" holds global bit "i" (so element 0 is the least
# significant bit of the last byte).
def to_bits(sequence) -> np.ndarray:
    if _is_byte(sequence):
        raise TypeError("to_bits requires a byte sequence, received a single byte")
    return np.unpackbits(_as_uint8(sequence))[::-1].astype(bool)


# Inverse of "to_bits", pack a boolean array (element "i" is global bit
# "i") into a new bytearray. The number of bits must be a multiple of 8.
def from_bits(bits) -> bytearray:
    bits = np.asarray(bits, dtype=bool)
    if (bits.ndim != 1):
        raise ValueError(f"bits must be one dimensional, received shape {bits.shape}")
    if (bits.size % 8 != 0):
        raise ValueError(f"number of bits must be a multiple of 8, received {bits.size}")
    return bytearray(np.packbits(bits[::-1]).tobytes())
