#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""Byte trie used to find dictionary entries by longest prefix.

Keys are byte strings, values are small non-negative ints. The trie is
filled once and only read afterwards, so lookups from several threads
need no locking.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple, Union

BytesLike = Union[bytes, bytearray, memoryview]


class Node:
    """One vertex of the trie. Edges are keyed by byte value (0..255)."""

    __slots__ = ("_branches", "_value", "_terminal")

    def __init__(self) -> None:
        self._branches: Dict[int, Node] = {}
        self._value = 0
        self._terminal = False

    def walk(self, byte: int) -> Optional["Node"]:
        return self._branches.get(byte)

    @property
    def is_terminal(self) -> bool:
        """True when the path from the root to this node is a stored key."""
        return self._terminal

    @property
    def is_leaf(self) -> bool:
        # The key spelled by a leaf is not a proper prefix of any other key.
        return not self._branches

    @property
    def value(self) -> int:
        if not self._terminal:
            raise ValueError("value requested on a non-terminal node")
        return self._value


class Trie:
    def __init__(self, items: Optional[Iterable[Tuple[BytesLike, int]]] = None) -> None:
        self._root = Node()
        self._size = 0
        if items is not None:
            for key, value in items:
                self.insert(key, value)

    @property
    def root(self) -> Node:
        return self._root

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (bytes, bytearray, memoryview)):
            return False
        return self.lookup(key) is not None

    def insert(self, key: BytesLike, value: int) -> bool:
        """Map key -> value, overwriting any previous value.

        Returns True if key was not stored before.
        """
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"trie value must be a non-negative int: {value!r}")
        node = self._root
        for b in bytes(key):
            nxt = node._branches.get(b)
            if nxt is None:
                nxt = Node()
                node._branches[b] = nxt
            node = nxt
        node._value = value
        if node._terminal:
            return False
        node._terminal = True
        self._size += 1
        return True

    def lookup(self, key: BytesLike) -> Optional[int]:
        node = self._root
        for b in bytes(key):
            nxt = node.walk(b)
            if nxt is None:
                return None
            node = nxt
        if node.is_terminal:
            return node.value
        return None

    def longest_prefix(self, data: BytesLike, start: int = 0) -> Tuple[int, Optional[int]]:
        """Longest stored key that is a prefix of data[start:].

        The walk keeps going past shorter keys ("t" before "the") and stops
        at the first byte with no edge. Returns (length, value), or (0, None)
        when nothing matches.
        """
        node = self._root
        best_len = 0
        best_val: Optional[int] = None
        pos = start
        end = len(data)
        while pos < end:
            nxt = node._branches.get(data[pos])
            if nxt is None:
                break
            node = nxt
            pos += 1
            if node._terminal:
                best_len = pos - start
                best_val = node._value
        return best_len, best_val
