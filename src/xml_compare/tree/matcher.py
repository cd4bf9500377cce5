"""Order-agnostic structural matching of element trees.

Sibling elements are treated as an unordered collection. Two sibling lists
are canonically equal when every element of the first can be paired with a
distinct, directly equal element of the second.

Pairing is greedy first-fit without backtracking: each element of the first
list takes the earliest unmatched equal element of the second, and that
choice is never revisited. Under ``elements_equal`` this always finds a
pairing when one exists, because direct equality is an equivalence
relation. With a custom ``equals`` relation that is not transitive the scan
can miss a valid pairing; that behavior is kept as is.
"""

from typing import TYPE_CHECKING, Callable, List, Optional, Sequence, Set, Tuple

if TYPE_CHECKING:
    from xml_compare.tree.builder import ElementNode

ElementPredicate = Callable[["ElementNode", "ElementNode"], bool]


def _first_fit(
    nodes_a: Sequence["ElementNode"],
    nodes_b: Sequence["ElementNode"],
    equals: ElementPredicate,
) -> Tuple[List[int], Optional[int]]:
    """Run the first-fit scan over two sibling lists of equal length.

    Returns:
        The partner indices found so far, and the position in ``nodes_a`` of
        the first node left without a partner (None when every node paired)
    """
    matched: Set[int] = set()
    assignment: List[int] = []
    for position, node_a in enumerate(nodes_a):
        for index, node_b in enumerate(nodes_b):
            if index not in matched and equals(node_a, node_b):
                matched.add(index)
                assignment.append(index)
                break
        else:
            return assignment, position
    return assignment, None


def greedy_match(
    nodes_a: Sequence["ElementNode"],
    nodes_b: Sequence["ElementNode"],
    equals: Optional[ElementPredicate] = None,
) -> Optional[List[int]]:
    """Pair each node of ``nodes_a`` with the first unmatched equal node of ``nodes_b``.

    Args:
        nodes_a: Sibling list from the first document
        nodes_b: Sibling list from the second document
        equals: Element relation, ``elements_equal`` by default

    Returns:
        For each node of ``nodes_a`` the index of its partner in ``nodes_b``,
        or None as soon as the lists differ in length or a node finds no partner
    """
    if len(nodes_a) != len(nodes_b):
        return None
    assignment, unmatched = _first_fit(nodes_a, nodes_b, equals or elements_equal)
    if unmatched is not None:
        return None
    return assignment


def equal_canonically(
    nodes_a: Sequence["ElementNode"],
    nodes_b: Sequence["ElementNode"],
    equals: Optional[ElementPredicate] = None,
) -> bool:
    """Check two sibling lists for order-agnostic equality."""
    return greedy_match(nodes_a, nodes_b, equals) is not None


def elements_equal(element_a: "ElementNode", element_b: "ElementNode") -> bool:
    """Check two elements for direct equality, recursing into their children."""
    if element_a.name != element_b.name:
        return False
    if element_a.attributes != element_b.attributes:
        return False
    if element_a.text != element_b.text:
        return False
    return equal_canonically(element_a.children, element_b.children)


def describe_mismatch(
    nodes_a: Sequence["ElementNode"],
    nodes_b: Sequence["ElementNode"],
    equals: Optional[ElementPredicate] = None,
) -> Optional[str]:
    """Explain why two sibling lists are not canonically equal.

    Returns:
        None when the lists match, otherwise a short description naming the
        first element of ``nodes_a`` that found no partner
    """
    if len(nodes_a) != len(nodes_b):
        return f"Sibling count differs: {len(nodes_a)} vs {len(nodes_b)}"

    _, unmatched = _first_fit(nodes_a, nodes_b, equals or elements_equal)
    if unmatched is None:
        return None
    return f"No match for element '{nodes_a[unmatched].name}' at index {unmatched}"
