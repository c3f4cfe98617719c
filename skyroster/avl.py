"""Balanced search tree of passengers keyed by CMND."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from .models import Passenger


@dataclass
class _Node:
    passenger: Passenger
    left: Optional["_Node"] = None
    right: Optional["_Node"] = None
    height: int = 1


def _height(node: Optional[_Node]) -> int:
    return node.height if node is not None else 0


def _balance(node: Optional[_Node]) -> int:
    return _height(node.left) - _height(node.right) if node is not None else 0


def _update(node: _Node) -> None:
    node.height = max(_height(node.left), _height(node.right)) + 1


def _rotate_right(x: _Node) -> _Node:
    y = x.left
    x.left = y.right
    y.right = x
    _update(x)
    _update(y)
    return y


def _rotate_left(x: _Node) -> _Node:
    y = x.right
    x.right = y.left
    y.left = x
    _update(x)
    _update(y)
    return y


def _insert(node: Optional[_Node], passenger: Passenger) -> tuple[_Node, bool]:
    if node is None:
        return _Node(passenger), True
    key = passenger.cmnd
    if key < node.passenger.cmnd:
        node.left, added = _insert(node.left, passenger)
    elif key > node.passenger.cmnd:
        node.right, added = _insert(node.right, passenger)
    else:
        return node, False
    _update(node)
    balance = _balance(node)
    if balance > 1:
        if key > node.left.passenger.cmnd:
            node.left = _rotate_left(node.left)
        return _rotate_right(node), added
    if balance < -1:
        if key < node.right.passenger.cmnd:
            node.right = _rotate_right(node.right)
        return _rotate_left(node), added
    return node, added


def _erase(node: Optional[_Node], cmnd: str) -> tuple[Optional[_Node], bool]:
    if node is None:
        return None, False
    if cmnd < node.passenger.cmnd:
        node.left, removed = _erase(node.left, cmnd)
    elif cmnd > node.passenger.cmnd:
        node.right, removed = _erase(node.right, cmnd)
    else:
        removed = True
        if node.left is None or node.right is None:
            return node.left or node.right, True
        successor = node.right
        while successor.left is not None:
            successor = successor.left
        node.passenger = successor.passenger
        node.right, _ = _erase(node.right, successor.passenger.cmnd)
    _update(node)
    balance = _balance(node)
    if balance > 1:
        if _balance(node.left) < 0:
            node.left = _rotate_left(node.left)
        return _rotate_right(node), removed
    if balance < -1:
        if _balance(node.right) > 0:
            node.right = _rotate_right(node.right)
        return _rotate_left(node), removed
    return node, removed


class AVLTree:
    """Passengers ordered by CMND; duplicate CMNDs are never stored twice."""

    def __init__(self) -> None:
        self.root: Optional[_Node] = None
        self._size = 0

    def insert(self, passenger: Passenger) -> bool:
        """Add a passenger; return False if the CMND is already present."""
        self.root, added = _insert(self.root, passenger)
        if added:
            self._size += 1
        return added

    def erase(self, cmnd: str) -> bool:
        """Remove the passenger with this CMND; return False if absent."""
        self.root, removed = _erase(self.root, cmnd)
        if removed:
            self._size -= 1
        return removed

    def search(self, cmnd: Optional[str]) -> Optional[Passenger]:
        """Return the stored passenger with this CMND, or None."""
        if cmnd is None:
            return None
        node = self.root
        while node is not None:
            if cmnd == node.passenger.cmnd:
                return node.passenger
            node = node.left if cmnd < node.passenger.cmnd else node.right
        return None

    def height(self) -> int:
        """Height of the tree; 0 when empty."""
        return _height(self.root)

    def __iter__(self) -> Iterator[Passenger]:
        stack: list[_Node] = []
        node = self.root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.passenger
            node = node.right

    def __len__(self) -> int:
        return self._size

    def __contains__(self, cmnd: object) -> bool:
        return isinstance(cmnd, str) and self.search(cmnd) is not None