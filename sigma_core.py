"""
sigma_core.py

Core data structures and operations for σ-algebras on a finite universe.

This module implements the finite setting used in first-year measure theory:
- Sets are immutable FiniteSet values kept in a canonical (sorted) order
- Collections are deduplicated, insertion-ordered families of sets
- A validator checks the σ-algebra axioms and reports every violation
- A closure engine computes σ(G) for a generating family G, either in one
  batch or as a step-by-step trace for animation

The universe Ω is always supplied by the caller. Elements may be any
hashable, totally ordered values; an optional ``key`` callable provides the
order for elements that are not naturally comparable.
"""

import re
import sys
from collections import namedtuple

import networkx as nx
from tqdm import tqdm


# ============================================================================
# SECTION 1: SET REPRESENTATION
# ============================================================================

class FiniteSet:
    """
    An immutable finite set of elements held in canonical order.

    Equality and hashing depend only on the elements, never on the order
    they were supplied in or on the ordering key. The key decides the
    canonical order used for display and for sorting collections.
    """

    __slots__ = ('_members', '_elements', '_key')

    def __init__(self, elements=(), key=None):
        """
        Create a set.

        Args:
            elements: any iterable of hashable elements (duplicates allowed)
            key: optional sort key giving the canonical element order
        """
        self._members = frozenset(elements)
        self._elements = tuple(sorted(self._members, key=key))
        self._key = key

    @property
    def elements(self):
        """Elements as a tuple in canonical order."""
        return self._elements

    @property
    def key(self):
        """Sort key fixed at construction; None for natural order."""
        return self._key

    def sort_key(self):
        """Cardinality first, then lexicographic in canonical element order."""
        if self.key is None:
            return (len(self._elements), self._elements)
        return (len(self._elements), tuple(self.key(e) for e in self._elements))

    def __repr__(self):
        return f"FiniteSet({format_set(self)})"

    def __str__(self):
        return format_set(self)

    def __len__(self):
        return len(self._elements)

    def __iter__(self):
        return iter(self._elements)

    def __contains__(self, element):
        return element in self._members

    def __bool__(self):
        return bool(self._members)

    def __hash__(self):
        return hash(self._members)

    def __eq__(self, other):
        if not isinstance(other, FiniteSet):
            return NotImplemented
        return self._members == other._members

    def __le__(self, other):
        """Subset relation"""
        return self._members <= normalize(other)._members

    def __lt__(self, other):
        """Proper subset relation"""
        return self._members < normalize(other)._members

    def __or__(self, other):
        return union(self, other)

    def __and__(self, other):
        return intersection(self, other)

    def __sub__(self, other):
        return difference(self, other)

    def __xor__(self, other):
        return symmetric_difference(self, other)


EMPTY = FiniteSet()


def normalize(s, key=None):
    """
    Return s in canonical form.

    Raw duplicates are dropped and elements sorted. The input is never
    modified; normalizing a FiniteSet with no new key returns it unchanged.

    Args:
        s: FiniteSet or iterable of elements
        key: optional sort key; defaults to the key already carried by s

    Returns:
        FiniteSet
    """
    if isinstance(s, FiniteSet):
        if key is None or key is s.key:
            return s
        return FiniteSet(s._members, key=key)
    return FiniteSet(s, key=key)


def _pair(a, b):
    a = normalize(a)
    b = normalize(b, a.key) if a.key is not None else normalize(b)
    return a, b


def equals(a, b):
    """True iff a and b contain the same elements."""
    a, b = _pair(a, b)
    return a == b


def union(a, b):
    a, b = _pair(a, b)
    return FiniteSet(a._members | b._members, key=a.key or b.key)


def intersection(a, b):
    a, b = _pair(a, b)
    return FiniteSet(a._members & b._members, key=a.key or b.key)


def difference(a, b):
    """Set difference a \\ b."""
    a, b = _pair(a, b)
    return FiniteSet(a._members - b._members, key=a.key or b.key)


def symmetric_difference(a, b):
    """a △ b = (a \\ b) ∪ (b \\ a)"""
    return union(difference(a, b), difference(b, a))


def complement(a, omega):
    """
    Complement of a relative to the universe.

    Defined strictly as Ω \\ a, so elements of a that lie outside Ω are
    simply ignored.
    """
    return difference(omega, a)


def is_subset(subset, superset):
    return normalize(subset) <= normalize(superset)


def indicator(s, element):
    """Indicator function 1_A(ω)."""
    return 1 if element in normalize(s) else 0


def format_set(s):
    """Display form: '∅' or '{1, 2, 3}' in canonical order."""
    s = normalize(s)
    if not s:
        return "∅"
    return "{" + ", ".join(str(e) for e in s) + "}"


def power_set(omega):
    """
    All subsets of a finite universe.

    Args:
        omega: the universe

    Returns:
        list of FiniteSets, sorted by cardinality then lexicographically
    """
    omega = normalize(omega)
    subsets = [EMPTY if omega.key is None else FiniteSet(key=omega.key)]
    for element in omega:
        subsets = subsets + [union(s, [element]) for s in subsets]
    return canonical_sort(subsets)


def parse_set(text):
    """
    Parse a set of integers from text.

    Accepts '{1, 2}', '1 2', '1,2', and '∅', '{}' or '' for the empty set.

    Raises:
        ValueError: if a token is not an integer
    """
    text = text.strip()
    if text.startswith("{") and text.endswith("}"):
        text = text[1:-1]
    text = text.strip()
    if text in ("", "∅"):
        return FiniteSet()

    elements = []
    for token in re.split(r"[,\s]+", text):
        if not token:
            continue
        try:
            elements.append(int(token))
        except ValueError:
            raise ValueError(f"Not an integer element: '{token}'") from None
    return FiniteSet(elements)


def parse_collection(text):
    """Parse one set per non-blank line."""
    return [parse_set(line) for line in text.splitlines() if line.strip()]


# ============================================================================
# SECTION 2: COLLECTION STORE
# ============================================================================

class SetCollection:
    """
    An insertion-ordered family of distinct sets.

    Keeps a list for ordering plus a hash index of the same sets, so
    membership is O(1) on average.
    """

    def __init__(self, sets=None, key=None):
        self._index = set()
        self._sets = []
        for s in sets or []:
            self.add(normalize(s, key))

    def __len__(self):
        return len(self._sets)

    def __iter__(self):
        return iter(self._sets)

    def __getitem__(self, index):
        return self._sets[index]

    def __contains__(self, target):
        return normalize(target) in self._index

    def __repr__(self):
        return "SetCollection([" + ", ".join(format_set(s) for s in self._sets) + "])"

    def add(self, s):
        """Append s if not already present. Returns True if it was added."""
        s = normalize(s)
        if s in self._index:
            return False
        self._index.add(s)
        self._sets.append(s)
        return True

    def copy(self):
        other = SetCollection()
        other._index = set(self._index)
        other._sets = list(self._sets)
        return other

    def to_list(self):
        return list(self._sets)


def contains(collection, target):
    """True iff some member of collection equals target."""
    if isinstance(collection, SetCollection):
        return target in collection
    target = normalize(target)
    return any(normalize(s) == target for s in collection)


def insert_if_absent(collection, s):
    """
    Append normalize(s) unless an equal set is already present.

    Args:
        collection: SetCollection or iterable of sets (not modified)
        s: set to insert

    Returns:
        (SetCollection, inserted) where inserted is a bool
    """
    if isinstance(collection, SetCollection):
        result = collection.copy()
    else:
        result = SetCollection(collection)
    inserted = result.add(s)
    return result, inserted


def remove_set(collection, target):
    """Members of collection not equal to target, order kept."""
    target = normalize(target)
    return [s for s in collection if normalize(s) != target]


def canonical_sort(collection):
    """Sort by cardinality, then lexicographically. For display only."""
    return sorted((normalize(s) for s in collection), key=FiniteSet.sort_key)


# ============================================================================
# SECTION 3: σ-ALGEBRA VALIDATION
# ============================================================================

MissingComplement = namedtuple('MissingComplement', ['set', 'complement'])
MissingUnion = namedtuple('MissingUnion', ['set_a', 'set_b', 'union'])


class ValidationResult:
    """
    Verdict on whether a collection is a σ-algebra on a universe.

    Attributes:
        is_valid: True iff no violation of any kind was found
        missing_empty: ∅ is not in the collection
        missing_whole: Ω is not in the collection
        missing_complements: list of MissingComplement(set, complement)
        missing_unions: list of MissingUnion(set_a, set_b, union)
    """

    def __init__(self, missing_empty=False, missing_whole=False,
                 missing_complements=None, missing_unions=None):
        self.missing_empty = missing_empty
        self.missing_whole = missing_whole
        self.missing_complements = list(missing_complements or [])
        self.missing_unions = list(missing_unions or [])

    @property
    def is_valid(self):
        return not (self.missing_empty or self.missing_whole
                    or self.missing_complements or self.missing_unions)

    def __bool__(self):
        return self.is_valid

    def __repr__(self):
        return (f"ValidationResult(is_valid={self.is_valid}, "
                f"missing_empty={self.missing_empty}, "
                f"missing_whole={self.missing_whole}, "
                f"missing_complements={len(self.missing_complements)}, "
                f"missing_unions={len(self.missing_unions)})")

    def messages(self, limit=3):
        """
        Human-readable diagnostic lines.

        Args:
            limit: maximum entries listed per violation kind; the rest are
                summarised as '...and N more'. None lists everything.

        Returns:
            list of str
        """
        if self.is_valid:
            return ["Valid σ-algebra: contains ∅ and Ω, closed under complement and union"]

        lines = []
        if self.missing_empty:
            lines.append("Missing empty set ∅")
        if self.missing_whole:
            lines.append("Missing sample space Ω")

        def listed(entries, render):
            shown = entries if limit is None else entries[:limit]
            out = [render(e) for e in shown]
            if len(entries) > len(shown):
                out.append(f"...and {len(entries) - len(shown)} more")
            return out

        if self.missing_complements:
            lines.append("Missing complements:")
            lines.extend(listed(
                self.missing_complements,
                lambda e: f"  For {format_set(e.set)}, missing {format_set(e.complement)}"))
        if self.missing_unions:
            lines.append("Missing unions:")
            lines.extend(listed(
                self.missing_unions,
                lambda e: f"  {format_set(e.set_a)} ∪ {format_set(e.set_b)} = {format_set(e.union)}"))
        return lines


def validate(collection, universe, key=None):
    """
    Check the σ-algebra axioms for a finite collection.

    Every violation is collected, not just the first:
    - ∅ and Ω must be members
    - each member's complement must be a member; a missing pair {A, Aᶜ}
      is reported once
    - the union of every pair of members must be a member; each missing
      union value is reported once, for the first pair that produced it

    Pairwise unions suffice because a finite collection closed under
    pairwise union is closed under all finite (hence countable) unions.

    Args:
        collection: iterable of sets
        universe: the universe Ω
        key: optional element sort key

    Returns:
        ValidationResult
    """
    omega = normalize(universe, key)
    members = [normalize(s, omega.key) for s in collection]
    index = SetCollection(members)

    result = ValidationResult(
        missing_empty=EMPTY not in index,
        missing_whole=omega not in index,
    )

    for s in members:
        c = complement(s, omega)
        if c in index:
            continue
        reported = any(
            (e.set == s and e.complement == c) or (e.set == c and e.complement == s)
            for e in result.missing_complements
        )
        if not reported:
            result.missing_complements.append(MissingComplement(s, c))

    seen_unions = set()
    for i in range(len(members)):
        for j in range(i + 1, len(members)):
            u = union(members[i], members[j])
            if u in index or u in seen_unions:
                continue
            seen_unions.add(u)
            result.missing_unions.append(MissingUnion(members[i], members[j], u))

    return result


def is_sigma_algebra(collection, universe):
    return validate(collection, universe).is_valid


# ============================================================================
# SECTION 4: CLOSURE ENGINE
# ============================================================================

STEP_START = 'start'
STEP_FOUNDATIONAL = 'foundational'
STEP_COMPLEMENTS = 'complements'
STEP_UNIONS = 'unions'
STEP_DONE = 'done'

STEP_DESCRIPTIONS = {
    STEP_START: "Start with generators",
    STEP_FOUNDATIONAL: "Add ∅ and Ω",
    STEP_COMPLEMENTS: "Add complements",
    STEP_UNIONS: "Add unions",
    STEP_DONE: "Closure complete — valid σ-algebra",
}


class GenerationStep(namedtuple('GenerationStep',
                                ['step_number', 'kind', 'added_sets', 'current_collection'])):
    """
    One frame of a closure trace.

    Attributes:
        step_number: position in the trace, starting at 0
        kind: one of 'start', 'foundational', 'complements', 'unions', 'done'
        added_sets: tuple of sets that entered the collection in this step
        current_collection: tuple snapshot of the collection after the step
        description: display text for the step, derived from kind
    """

    __slots__ = ()

    def __new__(cls, step_number, kind, added_sets, current_collection):
        return super().__new__(cls, step_number, kind,
                               tuple(added_sets), tuple(current_collection))

    @property
    def description(self):
        return STEP_DESCRIPTIONS[self.kind]

    def __repr__(self):
        added = ", ".join(format_set(s) for s in self.added_sets)
        return f"GenerationStep({self.step_number}, {self.kind!r}, added=[{added}])"


def _add_foundational(collection, omega):
    added = []
    for s in (FiniteSet(key=omega.key), omega):
        if collection.add(s):
            added.append(s)
    return added


def _saturate(collection, omega):
    """
    Grow collection to its σ-algebra closure, in place.

    Each outer iteration first adds every missing complement of the current
    members as one batch, then scans all pairs of the expanded collection and
    adds every missing union as a second batch. Yields (kind, added) for each
    non-empty batch and stops once a whole iteration adds nothing.

    The collection only grows and stays inside the power set of the elements
    seen, so the loop terminates.
    """
    while True:
        complements = SetCollection()
        for s in collection:
            c = complement(s, omega)
            if c not in collection:
                complements.add(c)
        for s in complements:
            collection.add(s)
        if complements:
            yield STEP_COMPLEMENTS, complements.to_list()

        members = collection.to_list()
        unions = SetCollection()
        for i in range(len(members)):
            for j in range(i + 1, len(members)):
                u = union(members[i], members[j])
                if u not in collection:
                    unions.add(u)
        for s in unions:
            collection.add(s)
        if unions:
            yield STEP_UNIONS, unions.to_list()

        if not complements and not unions:
            return


def close_to_sigma_algebra(generators, universe, key=None, verbose=False):
    """
    Compute σ(G), the smallest σ-algebra on Ω containing every generator.

    Args:
        generators: iterable of sets
        universe: the universe Ω
        key: optional element sort key
        verbose: If True, print progress to stderr

    Returns:
        list of FiniteSets, sorted by cardinality then lexicographically
    """
    omega = normalize(universe, key)
    collection = SetCollection(generators, key=omega.key)
    _add_foundational(collection, omega)

    for kind, added in _saturate(collection, omega):
        if verbose:
            print(f"{STEP_DESCRIPTIONS[kind]}: +{len(added)} -> {len(collection)} sets",
                  file=sys.stderr)

    if verbose:
        print(f"Final: {len(collection)} sets", file=sys.stderr)
    return canonical_sort(collection)


def close_to_sigma_algebra_stepwise(generators, universe, key=None, verbose=False):
    """
    Compute σ(G) as a trace of steps for a stepper UI.

    The trace always starts with a 'start' step listing the generators and
    ends with a 'done' step. A 'foundational' step appears only if ∅ or Ω
    had to be added. Complement and union batches that add nothing produce
    no step.

    Args:
        generators: iterable of sets
        universe: the universe Ω
        key: optional element sort key
        verbose: If True, print each step to stderr

    Returns:
        list of GenerationSteps; the last snapshot is the closure in
        insertion order
    """
    omega = normalize(universe, key)
    collection = SetCollection(generators, key=omega.key)
    steps = []

    def record(kind, added):
        step = GenerationStep(len(steps), kind, added, collection.to_list())
        steps.append(step)
        if verbose:
            print(f"{step.step_number}: {step.description} "
                  f"[{', '.join(format_set(s) for s in added)}]", file=sys.stderr)

    record(STEP_START, collection.to_list())

    foundational = _add_foundational(collection, omega)
    if foundational:
        record(STEP_FOUNDATIONAL, foundational)

    for kind, added in _saturate(collection, omega):
        record(kind, added)

    record(STEP_DONE, [])
    return steps


# ============================================================================
# SECTION 5: STRUCTURE OF A FINITE σ-ALGEBRA
# ============================================================================

def sigma_atoms(collection):
    """
    Minimal non-empty members of a collection.

    For a σ-algebra on a finite Ω these atoms partition Ω, and every member
    is a union of atoms.

    Args:
        collection: iterable of sets

    Returns:
        list of FiniteSets, canonically sorted
    """
    members = SetCollection(collection).to_list()
    non_empty = [s for s in members if s]
    return canonical_sort(
        s for s in non_empty if not any(t < s for t in non_empty)
    )


class SigmaPoset:
    """
    A collection of sets partially ordered by inclusion.

    Wraps a NetworkX DiGraph whose nodes are indices into ``set_list``.
    """

    def __init__(self, collection, order_type='inclusion', verbose=False):
        """
        Build the poset.

        Args:
            collection: iterable of sets
            order_type: 'inclusion' or 'containment'
                - 'inclusion': edge i -> j iff set i ⊊ set j
                - 'containment': edge i -> j iff set i ⊋ set j
            verbose: If True, show a progress bar on stderr
        """
        self.set_list = canonical_sort(SetCollection(collection))
        self.order_type = order_type

        if order_type == 'inclusion':
            test_fn = lambda a, b: a < b
        elif order_type == 'containment':
            test_fn = lambda a, b: b < a
        else:
            raise ValueError(f"Unknown order_type: {order_type}")

        self.graph = nx.DiGraph()
        self.graph.add_nodes_from(range(len(self.set_list)))

        for i in tqdm(range(len(self.set_list)), disable=not verbose, file=sys.stderr):
            for j in range(len(self.set_list)):
                if i != j and test_fn(self.set_list[i], self.set_list[j]):
                    self.graph.add_edge(i, j)

        if verbose:
            print(f"Poset built: {len(self.set_list)} nodes, {self.graph.number_of_edges()} edges",
                  file=sys.stderr)

    def transitive_reduction(self):
        """
        Return the transitive reduction of this poset (its Hasse diagram).

        Returns:
            SigmaPoset with reduced graph
        """
        reduced = SigmaPoset.__new__(SigmaPoset)
        reduced.set_list = self.set_list
        reduced.order_type = self.order_type
        reduced.graph = nx.transitive_reduction(self.graph)
        return reduced

    def get_set(self, node_id):
        return self.set_list[node_id]

    def node_of(self, s):
        """Node ID of a member set, or None."""
        s = normalize(s)
        for i, member in enumerate(self.set_list):
            if member == s:
                return i
        return None

    def predecessors(self, node_id):
        return list(self.graph.predecessors(node_id))

    def successors(self, node_id):
        return list(self.graph.successors(node_id))
