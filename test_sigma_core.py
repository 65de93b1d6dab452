"""
test_sigma_core.py

Tests for set representation, the collection store and text parsing.
"""

import pytest

from sigma_core import (
    FiniteSet, SetCollection, EMPTY,
    normalize, equals, union, intersection, difference,
    symmetric_difference, complement, is_subset, indicator,
    format_set, power_set, parse_set, parse_collection,
    contains, insert_if_absent, remove_set, canonical_sort,
)


OMEGA = [1, 2, 3, 4]


# ============================================================================
# Set representation
# ============================================================================

def test_normalize_sorts_and_dedupes():
    s = normalize([3, 1, 3, 2, 1])
    assert s.elements == (1, 2, 3)
    assert len(s) == 3


def test_normalize_does_not_mutate_input():
    raw = [3, 1, 2]
    normalize(raw)
    assert raw == [3, 1, 2]


def test_normalize_is_idempotent():
    s = normalize([2, 1])
    assert normalize(s) is s
    assert normalize(normalize([2, 1])) == normalize([2, 1])


def test_equality_ignores_order():
    assert equals([1, 2, 3], [3, 2, 1])
    assert FiniteSet([1, 2]) == FiniteSet([2, 1, 1])
    assert not equals([1, 2], [1, 2, 3])
    assert hash(FiniteSet([1, 2])) == hash(FiniteSet([2, 1]))


def test_empty_set_everywhere():
    assert equals([], EMPTY)
    assert not EMPTY
    assert union([], []) == EMPTY
    assert complement([], OMEGA) == FiniteSet(OMEGA)
    assert complement(OMEGA, OMEGA) == EMPTY


def test_set_operations():
    a, b = [1, 2, 3], [3, 4]
    assert union(a, b).elements == (1, 2, 3, 4)
    assert intersection(a, b).elements == (3,)
    assert difference(a, b).elements == (1, 2)
    assert symmetric_difference(a, b).elements == (1, 2, 4)
    assert complement(a, OMEGA).elements == (4,)


def test_operators_match_functions():
    a, b = FiniteSet([1, 2]), FiniteSet([2, 3])
    assert a | b == union(a, b)
    assert a & b == intersection(a, b)
    assert a - b == difference(a, b)
    assert a ^ b == symmetric_difference(a, b)
    assert FiniteSet([1]) <= a
    assert FiniteSet([1]) < a
    assert not a < a


def test_complement_ignores_elements_outside_universe():
    assert complement([1, 9], OMEGA).elements == (2, 3, 4)


def test_operations_do_not_mutate_inputs():
    a, b = [2, 1], [3, 2]
    union(a, b)
    symmetric_difference(a, b)
    assert a == [2, 1] and b == [3, 2]


def test_subset_and_indicator():
    assert is_subset([1, 2], OMEGA)
    assert not is_subset([1, 5], OMEGA)
    assert indicator([1, 3], 3) == 1
    assert indicator([1, 3], 2) == 0


def test_format_set():
    assert format_set([]) == "∅"
    assert format_set([3, 1, 2]) == "{1, 2, 3}"
    assert str(FiniteSet([2, 1])) == "{1, 2}"


def test_custom_order_key():
    s = FiniteSet(['a', 'b', 'c'], key=lambda e: -ord(e))
    assert s.elements == ('c', 'b', 'a')
    assert s == FiniteSet('abc')
    assert format_set(s) == "{c, b, a}"
    assert union(s, ['d']).elements == ('d', 'c', 'b', 'a')


def test_power_set():
    subsets = power_set([1, 2, 3])
    assert len(subsets) == 8
    assert subsets[0] == EMPTY
    assert subsets[-1] == FiniteSet([1, 2, 3])
    assert len(set(subsets)) == 8


# ============================================================================
# Parsing
# ============================================================================

@pytest.mark.parametrize("text, expected", [
    ("{1, 2}", (1, 2)),
    ("2 1 2", (1, 2)),
    ("3,1", (1, 3)),
    ("∅", ()),
    ("{}", ()),
    ("  ", ()),
])
def test_parse_set(text, expected):
    assert parse_set(text).elements == expected


def test_parse_set_rejects_non_integers():
    with pytest.raises(ValueError, match="x"):
        parse_set("{1, x}")


def test_parse_collection_skips_blank_lines():
    sets = parse_collection("{1}\n\n{2, 3}\n∅\n")
    assert sets == [FiniteSet([1]), FiniteSet([2, 3]), EMPTY]


# ============================================================================
# Collection store
# ============================================================================

def test_contains_uses_set_equality():
    collection = [[2, 1], [3]]
    assert contains(collection, [1, 2])
    assert not contains(collection, [1])
    assert contains(SetCollection(collection), (1, 2))


def test_set_collection_dedupes_and_keeps_order():
    c = SetCollection([[3], [1, 2], [2, 1], []])
    assert [format_set(s) for s in c] == ["{3}", "{1, 2}", "∅"]
    assert c.add([4]) is True
    assert c.add([4]) is False
    assert c[-1] == FiniteSet([4])


def test_insert_if_absent_is_pure():
    original = SetCollection([[1]])
    updated, inserted = insert_if_absent(original, [2])
    assert inserted
    assert len(original) == 1
    assert [s.elements for s in updated] == [(1,), (2,)]

    again, inserted = insert_if_absent(updated, [2])
    assert not inserted
    assert len(again) == 2


def test_insert_if_absent_accepts_plain_lists():
    updated, inserted = insert_if_absent([[1], [3, 2]], [2, 3])
    assert not inserted
    assert len(updated) == 2


def test_remove_set():
    assert remove_set([[1], [2, 1], [3]], [1, 2]) == [[1], [3]]


def test_canonical_sort():
    ordered = canonical_sort([[1, 2, 3, 4], [3], [2, 4], [], [1], [1, 3]])
    assert [s.elements for s in ordered] == [(), (1,), (3,), (1, 3), (2, 4), (1, 2, 3, 4)]


def test_order_key_cannot_be_reassigned():
    s = FiniteSet([1, 2, 3])
    with pytest.raises(AttributeError):
        s.key = lambda e: -e
    assert s.key is None
    assert s.sort_key() == (3, (1, 2, 3))
