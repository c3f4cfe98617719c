import random

from skyroster.avl import AVLTree
from skyroster.models import Passenger


def person(cmnd, last="LE"):
    return Passenger(cmnd, last, "AN", True, 1)


def check_balanced(node):
    if node is None:
        return 0
    left = check_balanced(node.left)
    right = check_balanced(node.right)
    assert abs(left - right) <= 1
    assert node.height == max(left, right) + 1
    return node.height


def test_empty_tree():
    tree = AVLTree()
    assert len(tree) == 0
    assert tree.height() == 0
    assert list(tree) == []
    assert tree.search("1") is None
    assert tree.search(None) is None


def test_insert_and_search():
    tree = AVLTree()
    p = person("555")
    assert tree.insert(p) is True
    assert tree.search("555") is p
    assert "555" in tree
    assert "556" not in tree


def test_duplicate_insert_keeps_original():
    tree = AVLTree()
    first = person("100", "FIRST")
    tree.insert(first)
    assert tree.insert(person("100", "SECOND")) is False
    assert len(tree) == 1
    assert tree.search("100").last_name == "FIRST"


def test_sequential_inserts_stay_balanced():
    tree = AVLTree()
    keys = [f"{i:05d}" for i in range(200)]
    for key in keys:
        tree.insert(person(key))
    assert [p.cmnd for p in tree] == keys
    assert check_balanced(tree.root) == tree.height()
    assert tree.height() <= 10


def test_random_inserts_and_erases():
    rng = random.Random(42)
    keys = [str(rng.randrange(10**8)) for _ in range(300)]
    tree = AVLTree()
    for key in keys:
        tree.insert(person(key))
    unique = sorted(set(keys))
    assert len(tree) == len(unique)
    removed = set(unique[::3])
    for key in removed:
        assert tree.erase(key) is True
        check_balanced(tree.root)
    remaining = [k for k in unique if k not in removed]
    assert [p.cmnd for p in tree] == remaining
    assert len(tree) == len(remaining)
    for key in removed:
        assert key not in tree


def test_erase_missing():
    tree = AVLTree()
    tree.insert(person("1"))
    assert tree.erase("2") is False
    assert len(tree) == 1


def test_erase_node_with_two_children():
    tree = AVLTree()
    for key in ["50", "30", "70", "20", "40", "60", "80"]:
        tree.insert(person(key))
    assert tree.erase("50") is True
    assert [p.cmnd for p in tree] == ["20", "30", "40", "60", "70", "80"]
    check_balanced(tree.root)


def test_erase_all():
    tree = AVLTree()
    keys = [str(k) for k in range(10, 40)]
    for key in keys:
        tree.insert(person(key))
    for key in keys:
        tree.erase(key)
    assert len(tree) == 0
    assert tree.root is None