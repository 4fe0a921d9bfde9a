from __future__ import annotations

from typing import Any, Dict, Hashable, List, Tuple

import numpy as np

from sampleWFC.WFC.Grid import Grid


def symbol_key(symbol: Any) -> Hashable:
    """value identity of a symbol, arrays (tiles, pixel colors) compare by their pixels"""
    if isinstance(symbol, np.ndarray):
        return (symbol.shape, symbol.dtype.str, symbol.tobytes())
    return symbol


class SymbolTable:
    def __init__(self):
        """dense ids for raw sample symbols, in first-seen order"""
        self.symbols: List[Any] = []
        self.counts: List[int] = []
        self._key_to_index: Dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self.symbols)

    def __repr__(self):
        return f"SymbolTable({len(self.symbols)} symbols, counts={self.counts})"

    def __contains__(self, symbol) -> bool:
        return symbol_key(symbol) in self._key_to_index

    def add(self, symbol: Any) -> int:
        """id of `symbol`, registering it on first sight; every call counts one occurrence"""
        key = symbol_key(symbol)
        index = self._key_to_index.get(key)
        if index is None:
            index = len(self.symbols)
            self._key_to_index[key] = index
            self.symbols.append(symbol)
            self.counts.append(0)
        self.counts[index] += 1
        return index

    def get_id(self, symbol: Any) -> int:
        try:
            return self._key_to_index[symbol_key(symbol)]
        except KeyError:
            raise ValueError(f"symbol '{symbol}' is not in the table") from None

    def get_symbol(self, index: int) -> Any:
        if not 0 <= index < len(self.symbols):
            raise ValueError(f"id '{index}' out of range (0-{len(self.symbols) - 1})")
        return self.symbols[index]

    def names(self, pattern) -> np.ndarray:
        """map an id array back to symbols (hashable symbols only)"""
        name_array = np.empty(len(self.symbols), dtype=object)
        for i, symbol in enumerate(self.symbols):
            name_array[i] = i if isinstance(symbol, np.ndarray) else symbol
        return name_array[np.asarray(pattern)]


def tabulate(rows) -> Tuple[Grid, SymbolTable]:
    """turn a 2-D array of raw symbols into a collapsed sample grid and its symbol table"""
    table = SymbolTable()
    ids = [[table.add(symbol) for symbol in row] for row in rows]
    if not ids or not ids[0]:
        raise ValueError("sample is empty")
    if any(len(row) != len(ids[0]) for row in ids):
        raise ValueError("sample rows must all have the same length")
    return Grid.from_ids(ids, len(table)), table
