"""Fixed-size bit set stored as 64-bit chunks."""

from __future__ import annotations

_CHUNK = 64
_MASK = (1 << _CHUNK) - 1


class Bitset:
    """A mutable set of bit positions, laid out in 64-bit words.

    Bits 0-63 live in the first word, the next 64 in the second, and so on.
    """

    __slots__ = ("_chunks",)

    def __init__(self, bits: int) -> None:
        if bits < 0:
            raise ValueError("bit count must not be negative")
        self._chunks = [0] * -(-bits // _CHUNK)

    def _locate(self, pos: int) -> tuple[int, int]:
        if pos < 0:
            raise IndexError(f"bit position {pos} is negative")
        major, minor = divmod(pos, _CHUNK)
        if major >= len(self._chunks):
            raise IndexError(f"bit position {pos} is out of range")
        return major, minor

    def clone(self) -> Bitset:
        """Return an independent copy."""
        copy = Bitset(0)
        copy._chunks = list(self._chunks)
        return copy

    def set(self, pos: int) -> Bitset:
        """Set the bit at ``pos`` and return this bit set."""
        major, minor = self._locate(pos)
        self._chunks[major] |= 1 << minor
        return self

    def clear(self, pos: int) -> Bitset:
        """Clear the bit at ``pos`` and return this bit set."""
        major, minor = self._locate(pos)
        self._chunks[major] &= ~(1 << minor) & _MASK
        return self

    def get(self, pos: int) -> bool:
        """Tell whether the bit at ``pos`` is set."""
        major, minor = self._locate(pos)
        return bool(self._chunks[major] >> minor & 1)

    def popcount(self) -> int:
        """Number of bits that are set."""
        return sum(bin(chunk).count("1") for chunk in self._chunks)

    def __hash__(self) -> int:
        value = self.popcount()
        for chunk in self._chunks:
            value ^= chunk
        return value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitset):
            return NotImplemented
        return self._chunks == other._chunks

    def __repr__(self) -> str:
        return f"Bitset({self._chunks!r})"