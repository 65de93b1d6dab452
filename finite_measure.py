"""
finite_measure.py

Probability measures on a finite sample space.

A measure is given by point masses: a mapping outcome -> probability.
The probability of an event is the sum of the masses of its outcomes.
Events are only measurable when they belong to the σ-algebra in use, see
is_measurable().
"""

from collections import namedtuple
from itertools import accumulate

from sigma_core import contains, normalize


SUM_TOLERANCE = 1e-9

MeasureValidation = namedtuple(
    'MeasureValidation', ['is_valid', 'sum_to_one', 'all_non_negative', 'total']
)


def _pairs(assignments):
    """(outcome, probability) pairs from a dict or a list; repeated outcomes all count."""
    if hasattr(assignments, "items"):
        return list(assignments.items())
    return list(assignments)


def validate_measure(assignments):
    """
    Check that point masses define a probability measure.

    Args:
        assignments: dict outcome -> probability, or (outcome, p) pairs

    Returns:
        MeasureValidation(is_valid, sum_to_one, all_non_negative, total)
    """
    pairs = _pairs(assignments)
    total = sum(p for _, p in pairs)
    all_non_negative = all(p >= 0 for _, p in pairs)
    sum_to_one = abs(total - 1) < SUM_TOLERANCE
    return MeasureValidation(
        is_valid=all_non_negative and sum_to_one,
        sum_to_one=sum_to_one,
        all_non_negative=all_non_negative,
        total=total,
    )


def event_probability(event, assignments):
    """P(A): total mass of the outcomes in the event."""
    event = normalize(event)
    return sum(p for outcome, p in _pairs(assignments) if outcome in event)


def uniform_distribution(omega):
    """
    Equal mass on every outcome.

    Raises:
        ValueError: if omega is empty
    """
    omega = normalize(omega)
    if not omega:
        raise ValueError("Cannot build a uniform distribution on an empty sample space")
    p = 1 / len(omega)
    return {outcome: p for outcome in omega}


def point_mass(omega, atom):
    """Dirac measure δ_atom on omega."""
    return {outcome: (1 if outcome == atom else 0) for outcome in normalize(omega)}


def inclusion_exclusion(p_a, p_b, p_ab):
    """P(A ∪ B) = P(A) + P(B) - P(A ∩ B)"""
    return p_a + p_b - p_ab


def partial_sums(probabilities):
    """Running totals P(A_1), P(A_1) + P(A_2), ..."""
    return list(accumulate(probabilities))


def is_measurable(event, collection):
    """True iff the event is a member of the σ-algebra `collection`."""
    return contains(collection, event)
