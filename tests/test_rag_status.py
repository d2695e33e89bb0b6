"""
Tests for RAG status normalization, display and ranking.
"""

import pytest

from core.rag_status import (
    display_rag_status,
    health_score_band,
    importance_rank,
    normalize_rag_status,
    status_rank,
)


class TestNormalizeRagStatus:
    """Free-text statuses map onto green/amber/red/error."""

    @pytest.mark.parametrize("raw,expected", [
        ("Green", "green"),
        ("AMBER", "amber"),
        (" red ", "red"),
        ("Yellow", "amber"),
        ("error", "error"),
    ])
    def test_known_values(self, raw, expected):
        assert normalize_rag_status(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "purple", "on track"])
    def test_unknown_values(self, raw):
        assert normalize_rag_status(raw) == "unknown"

    def test_idempotent(self):
        """Normalizing twice gives the same bucket."""
        for raw in ("Green", "yellow", "RED", "Error", "nonsense"):
            once = normalize_rag_status(raw)
            assert normalize_rag_status(once) == once


class TestDisplayRagStatus:
    def test_yellow_displays_as_amber(self):
        assert display_rag_status("yellow") == "Amber"

    def test_unknown_has_no_display(self):
        assert display_rag_status("blue") is None


class TestRanking:
    """Sort ranks: Red < Amber < Green < unset and High < Medium < Low < unset."""

    def test_status_order(self):
        ranks = [status_rank(s) for s in ("Red", "Amber", "Green", None)]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4

    def test_yellow_ranks_with_amber(self):
        assert status_rank("Yellow") == status_rank("Amber")

    def test_importance_order(self):
        ranks = [importance_rank(i) for i in ("High", "medium", "LOW", None)]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4

    def test_unrecognised_importance_sorts_last(self):
        assert importance_rank("Critical") == importance_rank(None)


class TestHealthScoreBand:
    @pytest.mark.parametrize("score,band", [
        (8.2, "green"),
        (5.01, "green"),
        (5, "amber"),
        (4.9, "red"),
        (0, "red"),
        (None, "unknown"),
    ])
    def test_bands(self, score, band):
        assert health_score_band(score) == band
