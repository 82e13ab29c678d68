"""Tests for the Kahn scheduler."""

import pytest

from toporder import CyclicGraphError, DanglingVertexError, TopologicalSortError, kahn_sort


class TestKahnSort:
    """Tests for ordering with kahn_sort."""

    def test_empty_graph(self) -> None:
        assert kahn_sort({}, {}) == ()

    def test_single_vertex(self) -> None:
        assert kahn_sort({}, {"a": []}) == ("a",)

    def test_linear_chain(self) -> None:
        # b depends on a, c depends on b
        incoming = {"a": [], "b": ["a"], "c": ["b"]}
        outgoing = {"a": ["b"], "b": ["c"], "c": []}
        assert kahn_sort(incoming, outgoing) == ("a", "b", "c")

    def test_diamond_dependency(self) -> None:
        incoming = {"a": [], "b": ["a"], "c": ["a"], "d": ["b", "c"]}
        outgoing = {"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": []}
        result = kahn_sort(incoming, outgoing)
        assert result[0] == "a"
        assert result[-1] == "d"
        assert result.index("b") < result.index("d")
        assert result.index("c") < result.index("d")

    def test_missing_incoming_entry_means_no_prerequisites(self) -> None:
        assert kahn_sort({"b": ["a"]}, {"a": ["b"], "b": []}) == ("a", "b")

    def test_works_with_integers(self) -> None:
        assert kahn_sort({2: [1], 3: [2]}, {1: [2], 2: [3], 3: []}) == (1, 2, 3)

    def test_works_with_tuples(self) -> None:
        result = kahn_sort({("b", 2): [("a", 1)]}, {("a", 1): [("b", 2)], ("b", 2): []})
        assert result == (("a", 1), ("b", 2))

    def test_does_not_mutate_inputs(self) -> None:
        incoming = {"a": [], "b": ["a"]}
        outgoing = {"a": ["b"], "b": []}
        kahn_sort(incoming, outgoing)
        assert incoming == {"a": [], "b": ["a"]}
        assert outgoing == {"a": ["b"], "b": []}


class TestKahnSortTieBreaking:
    """The frontier is first-in first-out."""

    def test_independent_vertices_keep_key_order(self) -> None:
        assert kahn_sort({}, {"c": [], "a": [], "b": []}) == ("c", "a", "b")

    def test_released_vertices_follow_dependent_order(self) -> None:
        incoming = {"b": ["a"], "c": ["a"]}
        assert kahn_sort(incoming, {"a": ["b", "c"], "b": [], "c": []}) == ("a", "b", "c")
        assert kahn_sort(incoming, {"a": ["c", "b"], "b": [], "c": []}) == ("a", "c", "b")

    def test_initial_frontier_is_emptied_before_released_vertices(self) -> None:
        incoming = {"c": ["a"]}
        outgoing = {"a": ["c"], "b": [], "c": []}
        assert kahn_sort(incoming, outgoing) == ("a", "b", "c")


class TestKahnSortDuplicateEdges:
    """Duplicate edges are counted once per occurrence."""

    def test_duplicate_edges_are_released(self) -> None:
        incoming = {"b": ["a", "a"]}
        outgoing = {"a": ["b", "b"], "b": []}
        assert kahn_sort(incoming, outgoing) == ("a", "b")

    def test_duplicate_edges_with_other_prerequisite(self) -> None:
        incoming = {"b": ["a", "a", "c"]}
        outgoing = {"a": ["b", "b"], "c": ["b"], "b": []}
        assert kahn_sort(incoming, outgoing) == ("a", "c", "b")

    def test_each_occurrence_must_be_released(self) -> None:
        # Two recorded prerequisites but only one edge to release them
        incoming = {"b": ["a", "a"]}
        outgoing = {"a": ["b"], "b": []}
        with pytest.raises(CyclicGraphError):
            kahn_sort(incoming, outgoing)


class TestKahnSortCycles:
    """Tests for cycle detection."""

    def test_two_cycle(self) -> None:
        with pytest.raises(CyclicGraphError, match="Cycle") as exc_info:
            kahn_sort({"a": ["b"], "b": ["a"]}, {"a": ["b"], "b": ["a"]})
        assert exc_info.value.remaining == ("a", "b")

    def test_self_loop(self) -> None:
        with pytest.raises(CyclicGraphError) as exc_info:
            kahn_sort({"a": ["a"]}, {"a": ["a"]})
        assert exc_info.value.remaining == ("a",)

    def test_remaining_excludes_ordered_vertices(self) -> None:
        # a -> b <-> c -> d
        incoming = {"a": [], "b": ["a", "c"], "c": ["b"], "d": ["c"]}
        outgoing = {"a": ["b"], "b": ["c"], "c": ["b", "d"], "d": []}
        with pytest.raises(CyclicGraphError) as exc_info:
            kahn_sort(incoming, outgoing)
        assert exc_info.value.remaining == ("b", "c", "d")

    def test_cycle_error_is_a_value_error(self) -> None:
        with pytest.raises(ValueError, match="Cycle"):
            kahn_sort({"a": ["a"]}, {"a": ["a"]})


class TestKahnSortAction:
    """Tests for the per-vertex action callback."""

    def test_action_matches_order(self) -> None:
        seen: list[str] = []
        incoming = {"b": ["a"], "c": ["a", "b"]}
        outgoing = {"a": ["b", "c"], "b": ["c"], "c": []}
        result = kahn_sort(incoming, outgoing, seen.append)
        assert tuple(seen) == result == ("a", "b", "c")

    def test_action_not_called_for_unresolved_vertices(self) -> None:
        seen: list[str] = []
        incoming = {"b": ["a", "c"], "c": ["b"]}
        outgoing = {"a": ["b"], "b": ["c"], "c": ["b"]}
        with pytest.raises(CyclicGraphError):
            kahn_sort(incoming, outgoing, seen.append)
        assert seen == ["a"]


class TestKahnSortDanglingVertices:
    """Edges must stay inside the key set of the outgoing mapping."""

    def test_unknown_dependent(self) -> None:
        with pytest.raises(DanglingVertexError) as exc_info:
            kahn_sort({}, {"a": ["z"]})
        assert exc_info.value.vertices == ("z",)

    def test_unknown_incoming_key(self) -> None:
        with pytest.raises(DanglingVertexError) as exc_info:
            kahn_sort({"z": []}, {"a": []})
        assert exc_info.value.vertices == ("z",)

    def test_unknown_prerequisite(self) -> None:
        with pytest.raises(DanglingVertexError) as exc_info:
            kahn_sort({"a": ["z"]}, {"a": []})
        assert exc_info.value.vertices == ("z",)

    def test_dangling_error_is_a_sort_error(self) -> None:
        with pytest.raises(TopologicalSortError):
            kahn_sort({}, {"a": ["z"]})
