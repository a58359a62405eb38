"""
Unit tests for embedding similarity ranking.
"""

import pytest

from services.semantic_search import cosine_similarity, rank_by_similarity


class TestCosineSimilarity:
    def test_identical_vectors(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)

    def test_scale_invariant(self):
        assert cosine_similarity([1.0, 1.0], [5.0, 5.0]) == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "a,b",
        [
            ([], [1.0]),
            ([0.0, 0.0], [1.0, 1.0]),
            ([1.0, 2.0], [1.0, 2.0, 3.0]),
            (["x", "y"], [1.0, 2.0]),
        ],
    )
    def test_degenerate_inputs_score_zero(self, a, b):
        assert cosine_similarity(a, b) == 0.0


class TestRankBySimilarity:
    def test_sorted_best_first(self):
        items = ["north", "north-east", "east"]
        vectors = [[1.0, 0.0], [1.0, 1.0], [0.0, 1.0]]

        ranked = rank_by_similarity([1.0, 0.1], items, vectors, threshold=0.3)

        assert [r.item for r in ranked] == ["north", "north-east"]
        assert ranked[0].score > ranked[1].score

    def test_threshold_is_exclusive(self):
        ranked = rank_by_similarity([1.0, 0.0], ["a"], [[1.0, 0.0]], threshold=1.0)
        assert ranked == []

    def test_skips_missing_and_malformed_vectors(self):
        items = ["none", "short", "good"]
        vectors = [None, [1.0], [1.0, 0.0]]

        ranked = rank_by_similarity([1.0, 0.0], items, vectors)

        assert [r.item for r in ranked] == ["good"]

    def test_zero_query_returns_nothing(self):
        assert rank_by_similarity([0.0, 0.0], ["a"], [[1.0, 0.0]]) == []
