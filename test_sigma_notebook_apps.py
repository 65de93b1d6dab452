"""
test_sigma_notebook_apps.py

Tests for the Dash app helpers and app construction.
"""

from dash import Dash

from sigma_core import FiniteSet, close_to_sigma_algebra_stepwise
from sigma_notebook_apps import (
    DEFAULT_OMEGA,
    serialize_set, deserialize_set, serialize_collection, deserialize_collection,
    serialize_step, deserialize_step,
    toggle_element, add_to_collection, parse_text_to_sets,
    render_validation, render_set_chips,
    create_sigma_builder_app, create_generator_app,
)


def test_set_serialization_is_json_safe():
    assert serialize_set(FiniteSet([3, 1])) == [1, 3]
    assert deserialize_set([3, 1]) == FiniteSet([1, 3])
    assert deserialize_set(None) == FiniteSet()
    assert serialize_collection([[2], []]) == [[2], []]
    assert deserialize_collection(None) == []


def test_step_serialization():
    steps = close_to_sigma_algebra_stepwise([[1]], DEFAULT_OMEGA)
    data = serialize_step(steps[1])
    assert data == {
        'step_number': 1,
        'kind': 'foundational',
        'description': "Add ∅ and Ω",
        'added_sets': [[], [1, 2, 3, 4]],
        'current_collection': [[1], [], [1, 2, 3, 4]],
    }
    assert deserialize_step(data) == steps[1]


def test_toggle_element():
    assert toggle_element([], 2) == [2]
    assert toggle_element([3, 1], 2) == [1, 2, 3]
    assert toggle_element([1, 2], 1) == [2]


def test_add_to_collection_skips_duplicates():
    sets, added = add_to_collection([[1, 2]], [[2, 1], [3], [3]])
    assert sets == [[1, 2], [3]]
    assert added == 1


def test_parse_text_to_sets():
    assert parse_text_to_sets("{1, 2}\n3") == ([[1, 2], [3]], None)
    sets, error = parse_text_to_sets("{1, a}")
    assert sets == []
    assert "a" in error
    assert parse_text_to_sets("   ") == ([], "No sets entered")


def test_render_validation_header():
    valid = render_validation([[], [1, 2, 3, 4]], DEFAULT_OMEGA)
    assert valid.children[0].children == "Valid σ-algebra!"
    invalid = render_validation([[1]], DEFAULT_OMEGA)
    assert invalid.children[0].children == "Invalid collection"


def test_render_set_chips_removable_ids():
    chips = render_set_chips([[1], [2, 3]], removable=True)
    ids = [c.id for c in chips.children]
    assert ids == [{'type': 'remove-set', 'index': 0}, {'type': 'remove-set', 'index': 1}]


def test_create_builder_app():
    collection = [[1]]
    app = create_sigma_builder_app(collection=collection)
    assert isinstance(app, Dash)
    assert app.layout is not None


def test_create_generator_app():
    app = create_generator_app(omega=[1, 2, 3], generators=[[1]])
    assert isinstance(app, Dash)
    assert app.layout is not None
