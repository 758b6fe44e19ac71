"""
Wire Codec and Dispatcher

This module parses a flat, length-prefixed sequence of field values into a
VerificationRequest, dispatches it to the verifier and maps the verdict to
a result code. The layout is:

    [mode, root..., leaf..., leaf_index, mmr_size,
     sibling_count, siblings..., peak_count, peaks...]

Under mode 1 (wide/Keccak) every digest takes two slots, high limb first.
Under mode 2 (compact/Poseidon) every digest takes one slot.

Malformed input raises DecodeError; it is never verified from partial
data and never coerced into a result code.
"""

import json
import logging
from enum import IntEnum
from pathlib import Path
from typing import Any, List, Sequence, Tuple, Union

from .constants import (
    LIMB_MASK,
    MAX_PATH_LENGTH,
    MAX_PEAK_COUNT,
    MAX_U64,
    PROGRAM_INPUT_JSON,
    PROGRAM_INPUT_TXT,
    STARK_PRIME,
)
from .mmr.digest import Digest
from .mmr.hashing import HashMode, HashScheme, get_scheme
from .mmr.verify import VerificationRequest, verify

logger = logging.getLogger(__name__)


class DecodeError(ValueError):
    """Raised for a malformed encoded request."""
    pass


class ResultCode(IntEnum):
    """Caller-facing verdict of decode_and_verify."""
    VALID = 0
    INVALID = 1


def header_length(width: int) -> int:
    """Slots in front of the sibling list: mode, root, leaf, index, size, count."""
    return 1 + 2 * width + 3


def minimum_length(width: int) -> int:
    """Shortest valid encoding: no siblings and no peaks."""
    return header_length(width) + 1


class _Reader:
    """Cursor over the raw slots; every read is bounds-checked."""

    def __init__(self, values: Sequence[int], scheme: HashScheme):
        self.values = values
        self.scheme = scheme
        self.width = scheme.digest_type.WIDTH
        self.position = 1

    @property
    def remaining(self) -> int:
        return len(self.values) - self.position

    def take(self, count: int, what: str) -> Sequence[int]:
        if count > self.remaining:
            raise DecodeError(
                f"Truncated request: {what} needs {count} slots, {self.remaining} left"
            )
        chunk = self.values[self.position:self.position + count]
        self.position += count
        return chunk

    def digest(self, what: str) -> Digest:
        fields = self.take(self.width, what)
        if self.scheme.mode is HashMode.WIDE:
            for limb in fields:
                if limb > LIMB_MASK:
                    raise DecodeError(f"{what} limb overflows 128 bits: {limb}")
        return self.scheme.digest_type.from_fields(fields)

    def u64(self, what: str) -> int:
        (value,) = self.take(1, what)
        if value > MAX_U64:
            raise DecodeError(f"{what} overflows 64 bits: {value}")
        return value

    def count(self, what: str, limit: int) -> int:
        (value,) = self.take(1, what)
        if value > limit:
            raise DecodeError(f"{what} {value} exceeds the limit of {limit}")
        return value


def _check_slots(raw: Sequence[Any]) -> List[int]:
    values = list(raw)
    for position, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(
                f"Slot {position} is not an integer: {type(value).__name__}"
            )
        if value < 0 or value >= STARK_PRIME:
            raise DecodeError(f"Slot {position} is not a field element: {value}")
    return values


def decode_request(raw: Sequence[int]) -> VerificationRequest:
    """
    Decode a flat field sequence into a VerificationRequest.

    Args:
        raw: Encoded request

    Returns:
        The decoded request

    Raises:
        DecodeError: On an unknown mode, a length that disagrees with the
            declared counts, oversized counts, or values overflowing their
            native width
    """
    values = _check_slots(raw)
    if not values:
        raise DecodeError("Empty request")

    try:
        scheme = get_scheme(values[0])
    except ValueError:
        raise DecodeError(f"Unknown mode: {values[0]}") from None

    width = scheme.digest_type.WIDTH
    if len(values) < minimum_length(width):
        raise DecodeError(
            f"Request of {len(values)} slots is shorter than the minimum "
            f"{minimum_length(width)} for mode {int(scheme.mode)}"
        )

    reader = _Reader(values, scheme)
    root = reader.digest("root")
    leaf = reader.digest("leaf")
    leaf_index = reader.u64("leaf_index")
    mmr_size = reader.u64("mmr_size")

    sibling_count = reader.count("sibling_count", MAX_PATH_LENGTH)
    if reader.remaining < sibling_count * width + 1:
        raise DecodeError(
            f"sibling_count {sibling_count} needs {sibling_count * width + 1} "
            f"more slots, {reader.remaining} left"
        )
    siblings = [reader.digest(f"sibling {i}") for i in range(sibling_count)]

    peak_count = reader.count("peak_count", MAX_PEAK_COUNT)
    if reader.remaining != peak_count * width:
        raise DecodeError(
            f"peak_count {peak_count} needs exactly {peak_count * width} "
            f"slots, {reader.remaining} left"
        )
    peaks = [reader.digest(f"peak {i}") for i in range(peak_count)]

    return VerificationRequest(
        mode=scheme.mode,
        root=root,
        leaf=leaf,
        leaf_index=leaf_index,
        mmr_size=mmr_size,
        siblings=tuple(siblings),
        peaks=tuple(peaks),
    )


def encode_request(request: VerificationRequest) -> List[int]:
    """
    Encode a VerificationRequest into its flat field sequence.

    Examples:
        >>> from mmr_proofs.mmr import CompactDigest
        >>> encode_request(VerificationRequest(
        ...     mode=2, root=CompactDigest(7), leaf=CompactDigest(5),
        ...     leaf_index=0, mmr_size=1, peaks=(CompactDigest(9),)))
        [2, 7, 5, 0, 1, 0, 1, 9]
    """
    encoded = [int(request.mode)]
    encoded.extend(request.root.to_fields())
    encoded.extend(request.leaf.to_fields())
    encoded.append(request.leaf_index)
    encoded.append(request.mmr_size)
    encoded.append(len(request.siblings))
    for sibling in request.siblings:
        encoded.extend(sibling.to_fields())
    encoded.append(len(request.peaks))
    for peak in request.peaks:
        encoded.extend(peak.to_fields())
    return encoded


def decode_and_verify(raw: Sequence[int], **options: Any) -> ResultCode:
    """
    Decode an encoded request, verify it and return the result code.

    Args:
        raw: Encoded request
        **options: Keyword options forwarded to mmr_proofs.mmr.verify

    Returns:
        ResultCode.VALID (0) or ResultCode.INVALID (1)

    Raises:
        DecodeError: If the request is malformed
    """
    try:
        request = decode_request(raw)
    except DecodeError as e:
        logger.warning(f"Rejecting malformed request: {e}")
        raise

    if verify(request, **options):
        return ResultCode.VALID
    return ResultCode.INVALID


def write_program_inputs(
    raw: Sequence[int], output_dir: Union[str, Path]
) -> Tuple[Path, Path]:
    """
    Write an encoded request as prover input files.

    The sequence is written as a JSON array wrapped in an outer array
    (input.cairo1.json) and as space-separated decimals (input.cairo1.txt).
    The sequence is decoded first so malformed input never reaches disk.

    Args:
        raw: Encoded request
        output_dir: Directory to write into; created if missing

    Returns:
        Tuple of (json_path, txt_path)
    """
    decode_request(raw)
    values = [int(value) for value in raw]

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    json_path = output_dir / PROGRAM_INPUT_JSON
    with open(json_path, "w") as f:
        json.dump([values], f)

    txt_path = output_dir / PROGRAM_INPUT_TXT
    with open(txt_path, "w") as f:
        f.write(" ".join(str(value) for value in values))

    logger.info(f"Wrote prover inputs ({len(values)} slots) to {output_dir}")
    return json_path, txt_path
