from __future__ import annotations

__all__ = [
    "range_termini",
    "interval_range",
    "covered_by_prefix",
]

from ranges import Range


def range_termini(rng: Range) -> tuple[int, int]:
    """Get the inclusive start and end positions ``[start,end]``
    from a :class:`ranges.Range`. These are referred to as the
    'termini'. Ranges are always ascending.

    Args:
      rng : A :class:`~ranges.Range` (which by default will be
            half-closed, i.e. not inclusive of the end position).
    """
    if rng.isempty():
        raise ValueError("Empty range has no termini")
    # If range is not empty then can compare regardless of if interval is closed/open
    start = rng.start if rng.include_start else rng.start + 1
    end = rng.end if rng.include_end else rng.end - 1
    return start, end


def interval_range(offset: int, length: int) -> Range:
    """The half-open byte interval ``[offset, offset + length)`` that a read
    of ``length`` bytes at ``offset`` targets.

    Args:
      offset : The (0-based) position of the first byte to read. Must not be
               negative, as a byte range request cannot address it.
      length : The number of bytes to read (the size of the caller's buffer).
    """
    if not all(map(lambda o: isinstance(o, int), [offset, length])):
        raise TypeError("Ranges must be discrete: use integers for start and end")
    if offset < 0:
        raise ValueError(f"Cannot read at negative offset {offset}")
    return Range(offset, offset + length)


def covered_by_prefix(rng: Range, prefix_length: int) -> bool:
    """Whether a prefetched prefix of ``prefix_length`` bytes can serve ``rng``.

    The end of ``rng`` must lie strictly inside the prefix, so a read ending
    exactly on the prefix boundary is not served from it (and goes to the
    network instead).

    Args:
      rng           : The half-open range to be read.
      prefix_length : The number of leading bytes of the resource held in memory.
    """
    return prefix_length > rng.end
