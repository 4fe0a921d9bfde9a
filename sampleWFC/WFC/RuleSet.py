from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, Iterator, List, NamedTuple, Tuple

import numpy as np


class Offset(NamedTuple):
    """displacement from a subject cell, x grows right and y grows down"""
    dx: int
    dy: int

    def __neg__(self) -> "Offset":
        return Offset(-self.dx, -self.dy)


LEFT = Offset(-1, 0)
RIGHT = Offset(1, 0)
UP = Offset(0, -1)
DOWN = Offset(0, 1)
CARDINAL: Tuple[Offset, ...] = (UP, DOWN, RIGHT, LEFT)

OFFSET_NAMES: Dict[Offset, str] = {LEFT: "left", RIGHT: "right", UP: "up", DOWN: "down"}


def opposite(offset: Tuple[int, int]) -> Offset:
    return -Offset(*offset)


class Rule(NamedTuple):
    """(SEA, COAST, LEFT): SEA may sit at the LEFT of COAST"""
    neighbor: int
    subject: int
    offset: Offset


class RuleSet:
    def __init__(self, num_possibilities: int, offsets: Iterable[Tuple[int, int]] = CARDINAL):
        """directed adjacency rules between symbol ids
        \n:param: num_possibilities:int -> number of symbol ids N, every id must be < N
        \n:param: offsets:Iterable[Offset] -> offsets known up front, more are registered on demand
        """
        if num_possibilities < 0:
            raise ValueError(f"num_possibilities must be >= 0, got {num_possibilities}")
        self.num_possibilities = num_possibilities
        self.offsets: List[Offset] = []
        self._offset_to_index: Dict[Offset, int] = {}
        self._rules: List[Rule] = []
        # [offset, neighbor, subject], True when neighbor may sit at subject + offset
        self._compatibility = np.zeros((0, num_possibilities, num_possibilities), dtype=bool)
        self._frozen = False
        for offset in offsets:
            self.register_offset(offset)

    def __repr__(self):
        lines = [f"RuleSet({len(self._rules)} rules over {self.num_possibilities} ids)"]
        for offset in self.offsets:
            name = OFFSET_NAMES.get(offset, f"{tuple(offset)}")
            lines.append(f"{name}:\n{self._compatibility[self._offset_to_index[offset]].astype(int)}")
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __contains__(self, rule) -> bool:
        neighbor, subject, offset = rule
        index = self._offset_to_index.get(Offset(*offset))
        if index is None or not self._valid_id(neighbor) or not self._valid_id(subject):
            return False
        return bool(self._compatibility[index, neighbor, subject])

    def __eq__(self, other) -> bool:
        if not isinstance(other, RuleSet):
            return NotImplemented
        return self.num_possibilities == other.num_possibilities and set(self._rules) == set(other._rules)

    @property
    def rules(self) -> FrozenSet[Rule]:
        return frozenset(self._rules)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _valid_id(self, symbol_id) -> bool:
        return 0 <= int(symbol_id) < self.num_possibilities

    def _check_id(self, symbol_id: int) -> int:
        if not self._valid_id(symbol_id):
            raise ValueError(f"id '{symbol_id}' out of range (0-{self.num_possibilities - 1})")
        return int(symbol_id)

    def register_offset(self, offset: Tuple[int, int]) -> int:
        offset = Offset(int(offset[0]), int(offset[1]))
        if offset == (0, 0):
            raise ValueError("offset (0, 0) does not point at a neighbor")
        index = self._offset_to_index.get(offset)
        if index is not None:
            return index
        if self._frozen:
            raise ValueError(f"rule set is frozen, can not register offset {tuple(offset)}")
        index = len(self.offsets)
        self.offsets.append(offset)
        self._offset_to_index[offset] = index
        n = self.num_possibilities
        self._compatibility = np.concatenate([self._compatibility, np.zeros((1, n, n), dtype=bool)], axis=0)
        return index

    def add(self, neighbor: int, subject: int, offset: Tuple[int, int], dual: bool = False) -> bool:
        """register a rule, structurally equal rules are stored once

        Args:
            neighbor (int): id allowed at subject position + offset
            subject (int): id of the cell the offset is measured from
            offset (Tuple[int, int]): (dx, dy)
            dual (bool, optional): also register (subject, neighbor, -offset). Nothing else derives
                                   the inverse of a rule. Defaults to False.

        Returns:
            bool: True when the rule was not present yet
        """
        if self._frozen:
            raise ValueError("rule set is frozen")
        neighbor = self._check_id(neighbor)
        subject = self._check_id(subject)
        d = self.register_offset(offset)
        added = False
        if not self._compatibility[d, neighbor, subject]:
            self._compatibility[d, neighbor, subject] = True
            self._rules.append(Rule(neighbor, subject, self.offsets[d]))
            added = True
        if dual:
            added = self.add(subject, neighbor, opposite(offset)) or added
        return added

    def freeze(self) -> "RuleSet":
        """make the rule table read-only for the lifetime of a solve"""
        self._frozen = True
        self._compatibility.setflags(write=False)
        return self

    def allowed_mask(self, candidates: np.ndarray, offset: Tuple[int, int]) -> np.ndarray:
        """boolean version of possibilities_for, `candidates` is a mask of length N"""
        index = self._offset_to_index.get(Offset(*offset))
        if index is None:
            return np.zeros(self.num_possibilities, dtype=bool)
        return np.any(self._compatibility[index][:, np.asarray(candidates, dtype=bool)], axis=1)

    def possibilities_for(self, candidates: Iterable[int], offset: Tuple[int, int]) -> FrozenSet[int]:
        """ids that may sit at `offset` from a cell holding any of `candidates`

        A collapsed cell is passed as its single id. The union is permissive: an id compatible
        with at least one remaining candidate is kept. Empty when no rule matches.
        """
        mask = np.zeros(self.num_possibilities, dtype=bool)
        for candidate in candidates:
            mask[self._check_id(candidate)] = True
        return frozenset(int(i) for i in np.flatnonzero(self.allowed_mask(mask, offset)))
