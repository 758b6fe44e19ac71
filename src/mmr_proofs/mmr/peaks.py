"""
MMR Peak Computation and Aggregation

This module climbs a leaf up its sibling path to a peak, locates a leaf
within the mountains of a structure, and bags a peak set into the
structure's committed root.

Mountains are laid out left to right in order of decreasing height. For a
structure of n leaves the mountain heights are the positions of the set
bits of n, most significant first, so the canonical peak count of n is its
population count.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Sequence

from .digest import Digest
from .hashing import HashScheme


class ParityConvention(Enum):
    """
    Which climb indices are left children.

    ODD_IS_LEFT is canonical: indices start at the node's heap number plus
    one, so odd indices are left children and the parent of index i is
    (i + 1) // 2. EVEN_IS_LEFT is the alternate convention found in older
    proof generators: indices start at the zero-based position inside the
    mountain, even indices are left children and the parent is i // 2.
    """
    ODD_IS_LEFT = "odd-is-left"
    EVEN_IS_LEFT = "even-is-left"


@dataclass(frozen=True)
class LeafLocation:
    """
    Position of a leaf inside the mountain range.

    Attributes:
        peak_position: Index of the leaf's mountain in the peak set
        height: Height of that mountain (length of the sibling path)
        local_position: Zero-based position of the leaf inside the mountain
    """
    peak_position: int
    height: int
    local_position: int


def is_left_child(index: int, convention: ParityConvention = ParityConvention.ODD_IS_LEFT) -> bool:
    if convention is ParityConvention.ODD_IS_LEFT:
        return index % 2 == 1
    return index % 2 == 0


def parent_index(index: int, convention: ParityConvention = ParityConvention.ODD_IS_LEFT) -> int:
    """
    Advance a climb index to its parent.

    Under ODD_IS_LEFT the parent is (index + 1) // 2, except that indices
    at or below 1 map to the root sentinel 0.
    """
    if convention is ParityConvention.ODD_IS_LEFT:
        if index <= 1:
            return 0
        return (index + 1) // 2
    return index // 2


def climb_start_index(
    local_position: int,
    height: int,
    convention: ParityConvention = ParityConvention.ODD_IS_LEFT,
) -> int:
    """
    Climb index of a leaf given its position inside a mountain.

    Under ODD_IS_LEFT a mountain of height h numbers its leaves
    2**h + 1 .. 2**h + 2**h, which keeps every index on the path above 1
    until the peak is reached.

    Examples:
        >>> climb_start_index(0, 1)
        3
        >>> climb_start_index(1, 1)
        4
        >>> climb_start_index(5, 3, ParityConvention.EVEN_IS_LEFT)
        5
    """
    if local_position < 0 or local_position >= (1 << height):
        raise ValueError(
            f"Position {local_position} outside a mountain of height {height}"
        )
    if convention is ParityConvention.ODD_IS_LEFT:
        return (1 << height) + local_position + 1
    return local_position


def compute_peak(
    index: int,
    leaf_digest: Digest,
    sibling_path: Sequence[Digest],
    scheme: HashScheme,
    convention: ParityConvention = ParityConvention.ODD_IS_LEFT,
) -> Digest:
    """
    Climb from a leaf digest to the peak of its mountain.

    At each level the current node is combined with its sibling in
    left/right order decided by the parity of the current index, then the
    index advances to the parent.

    Args:
        index: Climb index of the leaf (see climb_start_index)
        leaf_digest: Hash of the raw leaf value under the scheme
        sibling_path: Sibling digests from the leaf level upward
        scheme: Hash scheme of the request
        convention: Parity convention the sibling path was generated with

    Returns:
        The peak digest; the leaf digest itself for an empty path
    """
    current = leaf_digest
    for sibling in sibling_path:
        if is_left_child(index, convention):
            current = scheme.combine_pair(current, sibling)
        else:
            current = scheme.combine_pair(sibling, current)
        index = parent_index(index, convention)
    return current


def peak_count(mmr_size: int) -> int:
    """Canonical number of peaks of a structure with mmr_size leaves."""
    return bin(mmr_size).count("1")


def mountain_heights(mmr_size: int) -> List[int]:
    """
    Heights of the mountains of a structure, tallest (leftmost) first.

    Examples:
        >>> mountain_heights(11)
        [3, 1, 0]
        >>> mountain_heights(0)
        []
    """
    if mmr_size < 0:
        raise ValueError(f"Structure size must be non-negative, got {mmr_size}")
    return [bit for bit in range(mmr_size.bit_length() - 1, -1, -1) if (mmr_size >> bit) & 1]


def locate_leaf(leaf_index: int, mmr_size: int) -> LeafLocation:
    """
    Find the mountain holding a leaf.

    Args:
        leaf_index: Zero-based position of the leaf among all leaves
        mmr_size: Number of leaves in the structure

    Returns:
        LeafLocation with the peak position, mountain height and local position

    Raises:
        ValueError: If the leaf index is outside the structure
    """
    if leaf_index < 0 or leaf_index >= mmr_size:
        raise ValueError(f"Leaf index {leaf_index} outside a structure of {mmr_size} leaves")

    offset = 0
    for position, height in enumerate(mountain_heights(mmr_size)):
        width = 1 << height
        if leaf_index < offset + width:
            return LeafLocation(
                peak_position=position,
                height=height,
                local_position=leaf_index - offset,
            )
        offset += width

    raise AssertionError("mountain widths must sum to mmr_size")


def bag_peaks(peaks: Sequence[Digest], scheme: HashScheme) -> Digest:
    """
    Fold a peak set into one accumulator, right to left.

    Starting from the rightmost peak, each next-left peak is combined with
    the running result as combine_pair(left, running).

    Args:
        peaks: Peak digests, tallest first
        scheme: Hash scheme of the request

    Returns:
        The bagged digest; the scheme's zero digest for an empty set
    """
    if not peaks:
        return scheme.zero()

    running = peaks[-1]
    for peak in reversed(peaks[:-1]):
        running = scheme.combine_pair(peak, running)
    return running


def compute_root(peaks: Sequence[Digest], mmr_size: int, scheme: HashScheme) -> Digest:
    """Bind the bagged peaks to the structure size: combine_pair(size, bag)."""
    scheme.check(*peaks)
    return scheme.combine_pair(scheme.embed_scalar(mmr_size), bag_peaks(peaks, scheme))
