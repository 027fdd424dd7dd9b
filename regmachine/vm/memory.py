"""
regmachine/vm/memory.py

Register file for VM execution.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

import numpy as np

RegID = int


class RegisterBank:
    """
    Fixed-width register file of signed 64-bit integers.

    Every read and write is bounds-checked: a register index outside
    ``[0, len(bank))`` is a caller error and raises IndexError. Values that do
    not fit in 64 bits raise OverflowError on write.
    """

    def __init__(self, size: int):
        if size <= 0:
            raise ValueError(f"Register file needs at least one register, got {size}")
        self.data: np.ndarray = np.zeros(size, dtype=np.int64)

    @classmethod
    def from_values(cls, values: Iterable[int]) -> "RegisterBank":
        """Build a register file holding the given initial values."""
        values = list(values)
        bank = cls(len(values))
        bank.data[:] = values
        return bank

    @classmethod
    def seeded(cls, size: int, reg: RegID, value: int) -> "RegisterBank":
        """All zeros except one seeded register."""
        bank = cls(size)
        bank[reg] = value
        return bank

    def _check(self, rid: RegID) -> None:
        if not 0 <= rid < len(self.data):
            raise IndexError(f"Register {rid} out of range for {len(self.data)}-register file")

    def __getitem__(self, rid: RegID) -> int:
        self._check(rid)
        return int(self.data[rid])

    def __setitem__(self, rid: RegID, value: int) -> None:
        self._check(rid)
        self.data[rid] = value

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self):
        return iter(self.tolist())

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RegisterBank):
            return np.array_equal(self.data, other.data)
        if isinstance(other, (list, tuple)):
            return self.tolist() == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"RegisterBank({self.tolist()})"

    def tolist(self) -> List[int]:
        return self.data.tolist()

    def snapshot(self) -> Tuple[int, ...]:
        """Immutable copy of the current values."""
        return tuple(self.data.tolist())

    def copy(self) -> "RegisterBank":
        bank = RegisterBank(len(self.data))
        bank.data[:] = self.data
        return bank
