"""Reading, printing and renumbering of BTOR2 circuits."""

from __future__ import annotations

import copy
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

_UNARY = "not inc dec neg redand redor redxor".split()
_BINARY = (
    "iff implies eq neq sgt sgte slt slte ugt ugte ult ulte and nand nor or xnor "
    "xor rol ror sll sra srl add mul sdiv smod srem sub udiv urem uaddo saddo "
    "usubo ssubo umulo smulo sdivo concat read"
).split()
_TERNARY = ["ite", "write"]
_OTHER = (
    "bad const constd consth constraint fair init input justice next one ones "
    "output sext slice sort state uext zero"
).split()


class Btor2Error(Exception):
    """Raised when a circuit cannot be read or manipulated."""


Tag = Enum(
    "Tag",
    {name.upper(): name for name in sorted(_UNARY + _BINARY + _TERNARY + _OTHER)},
)
Tag.__doc__ = "Operators and keywords that can start a BTOR2 line."


class SortTag(Enum):
    """The two kinds of sorts."""

    BITVEC = "bitvec"
    ARRAY = "array"


@dataclass
class Sort:
    """A sort as attached to a line: its id and shape."""

    id: int = 0
    tag: SortTag | None = None
    name: str = ""
    width: int = 0
    index: int = 0
    element: int = 0


# Operators whose trailing arguments are widths or bit indices, not node ids.
_INDEXED_EXTRA = {Tag.SEXT: 1, Tag.UEXT: 1, Tag.SLICE: 2}
_ARITY = {
    **{Tag(name): 1 for name in _UNARY},
    **{Tag(name): 2 for name in _BINARY},
    **{Tag(name): 3 for name in _TERNARY},
}
_PROPERTY_TAGS = frozenset(
    {Tag.INIT, Tag.NEXT, Tag.BAD, Tag.OUTPUT, Tag.CONSTRAINT, Tag.FAIR, Tag.JUSTICE}
)


@dataclass
class Line:
    """One line of a circuit."""

    id: int
    tag: Tag
    name: str
    sort: Sort = field(default_factory=Sort)
    args: list[int] = field(default_factory=list)
    nargs: int = 0
    init: int = 0
    next: int = 0
    constant: str | None = None
    symbol: str | None = None
    lineno: int = 0

    def __str__(self) -> str:
        parts = [str(self.id), self.name]
        if self.tag is Tag.SORT:
            parts.append(self.sort.name)
            if self.sort.tag is SortTag.BITVEC:
                parts.append(str(self.sort.width))
            else:
                parts.extend((str(self.sort.index), str(self.sort.element)))
        elif self.sort.id:
            parts.append(str(self.sort.id))
        count = self.nargs + _INDEXED_EXTRA.get(self.tag, 0)
        parts.extend(str(arg) for arg in self.args[:count])
        if self.constant:
            parts.append(self.constant)
        if self.symbol:
            parts.append(self.symbol)
        return " ".join(parts)


def _parse_line(tokens: list[str], lineno: int, known: dict[int, Line]) -> Line:
    rest = iter(tokens)

    def fail(message: str) -> Btor2Error:
        return Btor2Error(f"line {lineno}: {message}")

    def number() -> int:
        token = next(rest, None)
        if token is None or not re.fullmatch(r"-?\d+", token):
            raise fail(f"expected a number, got {token!r}")
        return int(token)

    def reference(tag: Tag | None = None) -> Line:
        ident = number()
        target = known.get(abs(ident))
        if target is None or (tag is not None and target.tag is not tag):
            raise fail(f"invalid reference {ident}")
        return target

    def sort_ref() -> Sort:
        return copy.deepcopy(reference(Tag.SORT).sort)

    def node() -> int:
        ident = number()
        if abs(ident) not in known:
            raise fail(f"undefined argument {ident}")
        return ident

    ident = number()
    if ident <= 0 or ident in known:
        raise fail(f"invalid id {ident}")
    name = next(rest, "")
    try:
        tag = Tag(name)
    except ValueError:
        raise fail(f"unknown tag {name!r}") from None
    line = Line(id=ident, tag=tag, name=name, lineno=lineno)

    if tag is Tag.SORT:
        kind = next(rest, "")
        if kind == "bitvec":
            line.sort = Sort(ident, SortTag.BITVEC, kind, width=number())
        elif kind == "array":
            index, element = sort_ref().id, sort_ref().id
            line.sort = Sort(ident, SortTag.ARRAY, kind, index=index, element=element)
        else:
            raise fail(f"unknown sort kind {kind!r}")
    elif tag in (Tag.CONST, Tag.CONSTD, Tag.CONSTH):
        line.sort = sort_ref()
        line.constant = next(rest, None)
        if line.constant is None:
            raise fail("missing constant")
    elif tag in (Tag.ZERO, Tag.ONE, Tag.ONES, Tag.INPUT, Tag.STATE):
        line.sort = sort_ref()
    elif tag in (Tag.INIT, Tag.NEXT):
        line.sort = sort_ref()
        state = reference(Tag.STATE)
        value = node()
        line.args, line.nargs = [state.id, value], 2
        setattr(state, tag.value, value)
    elif tag in (Tag.OUTPUT, Tag.BAD, Tag.CONSTRAINT, Tag.FAIR):
        line.args, line.nargs = [node()], 1
    elif tag is Tag.JUSTICE:
        line.nargs = number()
        line.args = [node() for _ in range(line.nargs)]
    else:
        line.sort = sort_ref()
        line.nargs = _ARITY.get(tag, 1)
        line.args = [node() for _ in range(line.nargs)]
        line.args += [number() for _ in range(_INDEXED_EXTRA.get(tag, 0))]

    line.symbol = next(rest, None)
    if next(rest, None) is not None:
        raise fail("unexpected trailing tokens")
    return line


def parse_lines(text: str) -> list[Line]:
    """Parse BTOR2 text into its lines, checking references as it goes."""
    known: dict[int, Line] = {}
    for lineno, raw in enumerate(text.splitlines(), 1):
        tokens = raw.split(";", 1)[0].split()
        if tokens:
            line = _parse_line(tokens, lineno, known)
            known[line.id] = line
    return list(known.values())


class Btor2:
    """A parsed circuit whose lines can be renumbered and dropped."""

    def __init__(self, path) -> None:
        try:
            text = Path(path).read_text()
        except OSError as exc:
            raise Btor2Error("failed to open circuit") from exc
        self._load(parse_lines(text))

    @classmethod
    def from_text(cls, text: str) -> Btor2:
        circuit = cls.__new__(cls)
        circuit._load(parse_lines(text))
        return circuit

    def _load(self, lines: Iterable[Line]) -> None:
        self._lines = {line.id: line for line in lines}
        self._dropped: set[int] = set()
        self._parsed_max_id = max(self._lines, default=0)
        self.max_id = self._parsed_max_id
        self.num_states = sum(1 for _ in self.states())
        self.num_inputs = sum(1 for _ in self.inputs())
        self.bads: list[int] = []
        self.constraints: list[int] = []

    def __iter__(self) -> Iterator[Line]:
        return (line for key, line in self._lines.items() if key not in self._dropped)

    def __str__(self) -> str:
        return "".join(f"{line}\n" for line in self)

    def size(self) -> int:
        """One more than the largest id the circuit was read with."""
        return max(0, self._parsed_max_id) + 1

    def reindex(self, offset: int = 0, pre_indexed: Iterable[tuple[int, int]] = ()) -> int:
        """Renumber lines consecutively after ``offset``.

        Ids in ``pre_indexed`` are mapped as given. Property lines are
        removed; bad and constraint targets are collected in ``bads`` and
        ``constraints``. Returns the last id handed out.
        """
        mapping = [0] * self.size()

        def slot(ident: int) -> int:
            if ident < -len(mapping) or abs(ident) >= len(mapping):
                raise Btor2Error(f"id {ident} out of range")
            return abs(ident)

        for old, new in pre_indexed:
            if old < 0:
                raise Btor2Error(f"id {old} out of range")
            mapping[slot(old)] = new

        def lookup(ident: int) -> int:
            if not ident:
                return ident
            new = mapping[slot(ident)]
            if not new:
                raise Btor2Error(f"id {ident} has no new index")
            return new if ident > 0 else -new

        for line in list(self):
            if line.tag in _PROPERTY_TAGS:
                if line.tag is Tag.BAD:
                    self.bads.append(lookup(line.args[0]))
                elif line.tag is Tag.CONSTRAINT:
                    self.constraints.append(lookup(line.args[0]))
                self.drop(line.id)
                continue
            if not mapping[slot(line.id)]:
                offset += 1
                mapping[slot(line.id)] = offset
            line.id = lookup(line.id)
            line.sort.id = lookup(line.sort.id)
            if line.sort.tag is SortTag.ARRAY:
                line.sort.index = lookup(line.sort.index)
                line.sort.element = lookup(line.sort.element)
            line.args[: line.nargs] = [lookup(arg) for arg in line.args[: line.nargs]]

        for line in self.states():
            line.init = lookup(line.init)
            line.next = lookup(line.next)

        self.max_id = offset
        return offset

    def get_simulation(self) -> list[tuple[Line, int]]:
        """Pairs of inputs or states named ``=<id>`` with the id they name."""
        simulation = []
        for line in self:
            name = line.symbol or ""
            if line.tag not in (Tag.INPUT, Tag.STATE) or len(name) < 2 or name[0] != "=":
                continue
            match = re.match(r"-?\d+", name[1:])
            if match is None:
                raise Btor2Error(f"invalid simulation symbol {name!r}")
            simulation.append((copy.deepcopy(line), int(match.group())))
        return simulation

    def get_default_simulation(self, simulated: Btor2) -> list[tuple[Line, int]]:
        """Pair inputs with inputs and states with states, in order."""
        pairs = [
            *zip(self.inputs(), simulated.inputs()),
            *zip(self.states(), simulated.states()),
        ]
        return [(copy.deepcopy(mine), other.id) for mine, other in pairs]

    def drop(self, id: int) -> None:
        """Remove the line read with ``id`` from iteration."""
        if id not in self._lines:
            raise Btor2Error(f"no line with id {id}")
        self._dropped.add(id)

    def at(self, id: int) -> Line:
        """A copy of the line read with ``id``."""
        if id not in self._lines:
            raise Btor2Error(f"no line with id {id}")
        return copy.deepcopy(self._lines[id])

    def states(self) -> Iterator[Line]:
        return (line for line in self if line.tag is Tag.STATE)

    def inputs(self) -> Iterator[Line]:
        return (line for line in self if line.tag is Tag.INPUT)

    def inits(self) -> Iterator[tuple[int, int]]:
        return ((line.id, line.init) for line in self.states() if line.init)

    def nexts(self) -> Iterator[tuple[int, int]]:
        return ((line.id, line.next) for line in self.states() if line.next)