from __future__ import annotations
from typing import Iterable, Iterator, List, Sequence


# A frontier is a plain int where bit i marks state i as active.
MAX_STATES = 64


def bit(index: int) -> int:
    return 1 << index


def iter_bits(mask: int) -> Iterator[int]:
    """
    Yield the indices of the set bits in ascending order.
    Lowest bit first: this ordering is what makes branch enumeration reproducible.
    """
    while mask:
        low = mask & -mask
        yield low.bit_length() - 1
        mask ^= low


def mask_of(indices: Iterable[int]) -> int:
    mask = 0
    for i in indices:
        mask |= 1 << i
    return mask


def names_of(mask: int, names: Sequence[str]) -> List[str]:
    return [names[i] for i in iter_bits(mask)]
