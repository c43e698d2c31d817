"""Property-based checks of the forest operations.

Random acyclic hierarchies are drawn as flat rows in shuffled order, then
reconstructed and checked against the parent map they were drawn from.
"""

import copy

from hypothesis import given, settings, strategies as st

from forestlib import (
    MATCHED_CHILDREN_KEY,
    array_to_tree,
    filter_tree,
    flatten,
    fuzzy_query_tree,
    get_all_leaves,
    get_node_path,
    remove_empty_children,
)


@st.composite
def flat_records(draw, max_size=25):
    """Rows with unique ids whose parents always exist and precede them in id order."""
    size = draw(st.integers(min_value=0, max_value=max_size))
    parents = [draw(st.integers(min_value=-1, max_value=i - 1)) for i in range(size)]
    names = draw(st.lists(st.text(alphabet="abx", max_size=4), min_size=size, max_size=size))
    order = draw(st.permutations(range(size)))
    return [
        {"id": i, "parentId": parents[i] if parents[i] >= 0 else None, "name": names[i]}
        for i in order
    ]


def parent_map(records):
    return {record["id"]: record["parentId"] for record in records}


def ancestors(parents, node_id):
    chain = []
    current = parents[node_id]
    while current is not None:
        chain.append(current)
        current = parents[current]
    return list(reversed(chain))


@settings(max_examples=75)
@given(records=flat_records())
def test_reconstruct_then_flatten_is_preorder_permutation(records):
    parents = parent_map(records)
    flat = flatten(array_to_tree(records))

    assert len(flat) == len(records)
    assert sorted(node["id"] for node in flat) == sorted(parents)

    position = {node["id"]: index for index, node in enumerate(flat)}
    for node_id in parents:
        for ancestor in ancestors(parents, node_id):
            assert position[ancestor] < position[node_id]


@settings(max_examples=50)
@given(size=st.integers(min_value=0, max_value=20))
def test_reconstruct_without_parents_keeps_order(size):
    records = [{"id": i} for i in reversed(range(size))]
    assert array_to_tree(records) == records


@settings(max_examples=75)
@given(records=flat_records())
def test_node_path_is_ancestor_chain(records):
    parents = parent_map(records)
    forest = array_to_tree(records)

    for node_id in parents:
        assert get_node_path(forest, node_id) == ancestors(parents, node_id) + [node_id]
    assert get_node_path(forest, -1) == []


@settings(max_examples=75)
@given(records=flat_records(), query=st.text(alphabet="abx", min_size=1, max_size=2))
def test_fuzzy_search_keeps_exactly_matches_and_their_ancestors(records, query):
    parents = parent_map(records)
    names = {record["id"]: record["name"] for record in records}
    result = fuzzy_query_tree(array_to_tree(records), query)

    expected = set()
    for node_id, name in names.items():
        if query in name:
            expected.add(node_id)
            expected.update(ancestors(parents, node_id))

    kept = set()
    stack = list(result)
    while stack:
        node = stack.pop()
        kept.add(node["id"])
        matched = node[MATCHED_CHILDREN_KEY]
        assert query in node["name"] or matched
        stack.extend(matched)

    assert kept == expected


@settings(max_examples=75)
@given(records=flat_records(), empty_flags=st.lists(st.booleans(), max_size=25))
def test_cleanup_is_idempotent_and_conservative(records, empty_flags):
    forest = array_to_tree(records)
    for node in flatten(forest):
        if "children" not in node and node["id"] < len(empty_flags) and empty_flags[node["id"]]:
            node["children"] = []
    had_children = {node["id"]: "children" in node for node in flatten(forest)}
    non_empty = {node["id"] for node in flatten(forest) if node.get("children")}

    remove_empty_children(forest)
    once = copy.deepcopy(forest)
    remove_empty_children(forest)

    assert forest == once
    for node in flatten(forest):
        if node["id"] in non_empty:
            assert node["children"]
        else:
            assert "children" not in node
        if not had_children[node["id"]]:
            assert "children" not in node


@settings(max_examples=75)
@given(records=flat_records(), divisor=st.integers(min_value=2, max_value=4))
def test_filtered_copy_is_exclusive(records, divisor):
    parents = parent_map(records)

    def accept(node):
        return node["id"] % divisor != 0

    result = filter_tree(array_to_tree(records), filter=accept)

    expected = {
        node_id for node_id in parents
        if all(i % divisor != 0 for i in ancestors(parents, node_id) + [node_id])
    }
    assert {node["id"] for node in flatten(result)} == expected


@settings(max_examples=75)
@given(records=flat_records())
def test_leaves_and_internal_nodes_partition_the_forest(records):
    forest = array_to_tree(records)
    everything = {node["id"] for node in flatten(forest)}
    leaves = [node["id"] for node in get_all_leaves(forest)]
    internal = {node["id"] for node in flatten(forest) if node.get("children")}

    assert len(leaves) == len(set(leaves))
    assert set(leaves) | internal == everything
    assert not set(leaves) & internal
