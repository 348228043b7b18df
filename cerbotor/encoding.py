"""Writing the BTOR2 encodings that certification checks are made of."""

from __future__ import annotations

import copy
from collections.abc import Iterable
from pathlib import Path

from .btor2 import Btor2, Btor2Error, Line, SortTag, Tag

# Operators whose trailing arguments are widths or bit indices, not node ids.
_INDEXED_EXTRA = {Tag.SEXT: 1, Tag.UEXT: 1, Tag.SLICE: 2}


def _as_input(line: Line) -> Line:
    """A copy of ``line`` in which a state is turned into an input."""
    line = copy.deepcopy(line)
    if line.tag is Tag.STATE:
        line.tag = Tag.INPUT
        line.name = "input"
    return line


class Encoding:
    """An output file holding circuits and the boolean logic built over them.

    Every method that adds a line returns the id of that line.
    """

    def __init__(self, path, witness: Btor2, model: Btor2 | None = None) -> None:
        self.id = 0
        self.bool_id = 0
        self.true_id = 0
        self.offset = 0
        self.file = Path(path).open("w", encoding="utf-8")
        try:
            self.copy(witness)
            if model is not None:
                self.copy(model)
                self.id = model.max_id
            else:
                self.id = witness.max_id
            self.add_constants()
        except BaseException:
            self.file.close()
            raise
        self.offset = self.id

    def __enter__(self) -> Encoding:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        """Close the output file."""
        self.file.close()

    def copy(self, btor: Btor2) -> None:
        """Write every line of ``btor``, with states written as inputs."""
        for line in btor:
            self.file.write(f"{_as_input(line)}\n")

    def add_constants(self) -> None:
        """Add the boolean sort and the constant true."""
        self.id += 1
        self.file.write(f"{self.id} sort bitvec 1\n")
        self.bool_id = self.id
        self.id += 1
        self.file.write(f"{self.id} one {self.bool_id}\n")
        self.true_id = self.id

    def boolean_op(self, op: str, a: int, b: int = 0, c: int = 0) -> int:
        """Add a boolean operation on up to three operands."""
        self.id += 1
        parts = [str(self.id), op, str(self.bool_id), str(a)]
        parts.extend(str(operand) for operand in (b, c) if operand)
        self.file.write(" ".join(parts) + "\n")
        return self.id

    def bnot(self, a: int) -> int:
        return self.boolean_op("not", a)

    def beq(self, a: int, b: int) -> int:
        return self.boolean_op("eq", a, b)

    def bbad(self, a: int) -> int:
        """Add the bad property ``a``; the line is written without a newline."""
        self.id += 1
        self.file.write(f"{self.id} bad {a}")
        return self.id

    def band(self, *args: int) -> int:
        """Right-nested conjunction of one or more operands."""
        if not args:
            raise TypeError("band needs at least one operand")
        first, *rest = args
        if not rest:
            return first
        return self.boolean_op("and", first, self.band(*rest))

    def bor(self, *args: int) -> int:
        """Right-nested disjunction of one or more operands."""
        if not args:
            raise TypeError("bor needs at least one operand")
        first, *rest = args
        if not rest:
            return first
        return self.boolean_op("or", first, self.bor(*rest))

    def band_all(self, ids: Iterable[int]) -> int:
        """Balanced conjunction of ``ids``; true when there are none."""
        return self.reduce("and", ids, self.true_id)

    def bor_all(self, ids: Iterable[int]) -> int:
        """Balanced disjunction of ``ids``; false when there are none."""
        return self.reduce("or", ids, self.bnot(self.true_id))

    def reduce(self, op: str, ids: Iterable[int], empty_value: int) -> int:
        """Combine ``ids`` pairwise with ``op`` until one id is left."""
        ids = list(ids)
        if not ids:
            return empty_value
        while len(ids) > 1:
            combined = [
                self.boolean_op(op, a, b) for a, b in zip(ids[0::2], ids[1::2])
            ]
            if len(ids) % 2:
                combined.append(ids[-1])
            ids = combined
        return ids[0]

    def next(self, id: int) -> int:
        """The id that ``id`` has in the unrolled copy, keeping its sign."""
        shifted = abs(id) + self.offset
        return -shifted if id < 0 else shifted

    def next_all(self, ids: Iterable[int]) -> list[int]:
        return [self.next(ident) for ident in ids]

    def unroll(self, btor: Btor2) -> None:
        """Write a copy of ``btor`` shifted by ``offset``, states as inputs.

        Only valid directly after the constants, with consecutively
        numbered circuits.
        """
        for original in btor:
            self.id += 1
            line = _as_input(original)
            line.id = self.next(line.id)
            if line.id != self.id:
                raise Btor2Error(
                    f"line {original.id} does not follow consecutively when unrolled"
                )
            line.sort.id = self.next(line.sort.id)
            if line.sort.tag is SortTag.ARRAY:
                line.sort.index = self.next(line.sort.index)
                line.sort.element = self.next(line.sort.element)
            total = line.nargs + _INDEXED_EXTRA.get(line.tag, 0)
            line.args = [self.next(arg) for arg in line.args[: line.nargs]] + list(
                line.args[line.nargs : total]
            )
            self.file.write(f"{line}\n")