"""Tests for the pipeline metric conversions."""

import pytest

from hiring_core.core import metrics
from hiring_core.schemas import HealthThresholds


class TestSubHealthScores:

    @pytest.mark.parametrize("active,open_positions,target,expected", [
        (0, 0, 10, 100),     # nothing to fill
        (4, 2, 10, 20),
        (20, 2, 10, 100),
        (50, 1, 10, 100),    # clamped
        (5, 2, 10, 25),
    ])
    def test_candidate_volume_health(self, active, open_positions, target, expected):
        assert metrics.candidate_volume_health(active, open_positions, target) == expected

    @pytest.mark.parametrize("weekly,target,expected", [(18, 20, 90), (40, 20, 100), (0, 20, 0), (1, 8, 13)])
    def test_application_rate_health(self, weekly, target, expected):
        assert metrics.application_rate_health(weekly, target) == expected

    @pytest.mark.parametrize("avg_days,max_days,expected", [
        (0, 30, 100),
        (30, 30, 100),
        (33, 30, 90),
        (45, 30, 50),
        (90, 30, 0),
    ])
    def test_time_to_fill_health(self, avg_days, max_days, expected):
        assert metrics.time_to_fill_health(avg_days, max_days) == expected

    @pytest.mark.parametrize("diverse,total,target,expected", [
        (0, 0, 0.2, 0),
        (1, 10, 0.2, 50),
        (5, 10, 0.2, 100),
    ])
    def test_diversity_health(self, diverse, total, target, expected):
        assert metrics.diversity_health(diverse, total, target) == expected

    def test_zero_targets_do_not_divide(self):
        assert metrics.candidate_volume_health(3, 1, 0) == 100
        assert metrics.application_rate_health(3, 0) == 100
        assert metrics.diversity_health(1, 4, 0) == 100


class TestAggregation:

    def test_weighted_overall_score(self):
        sub_scores = {"candidate_volume": 20, "application_rate": 90, "time_to_fill": 90, "diversity_ratio": 90}
        weights = HealthThresholds().weights
        score = metrics.overall_health_score(sub_scores, weights)

        assert score == 62
        assert metrics.status_from_score(score) == metrics.STATUS_WARNING

    def test_overall_score_accepts_plain_weight_mapping(self):
        sub_scores = {"candidate_volume": 100, "application_rate": 0, "time_to_fill": 0, "diversity_ratio": 0}
        assert metrics.overall_health_score(sub_scores, {"candidate_volume": 25}) == 25

    @pytest.mark.parametrize("score,expected", [
        (100, "healthy"),
        (80, "healthy"),
        (79, "warning"),
        (60, "warning"),
        (59, "critical"),
        (0, "critical"),
    ])
    def test_status_with_default_cutoffs(self, score, expected):
        assert metrics.status_from_score(score, HealthThresholds()) == expected
        assert metrics.status_from_score(score) == expected

    def test_status_with_custom_cutoffs(self):
        thresholds = HealthThresholds(healthy_score_min=90, warning_score_min=70)
        assert metrics.status_from_score(85, thresholds) == "warning"
        assert metrics.status_from_score(65, thresholds) == "critical"

    def test_health_status_bundle(self):
        assert metrics.health_status(85) == {"status": "healthy", "color": "#00c851", "label": "Healthy"}

    @pytest.mark.parametrize("value,expected", [(2.5, 3), (62.5, 63), (61.49, 61), (0, 0)])
    def test_round_half_up(self, value, expected):
        assert metrics.round_half_up(value) == expected


class TestValidation:

    def test_default_thresholds_are_valid(self):
        assert metrics.validate_thresholds(HealthThresholds()) == []

    def test_weights_summing_to_99_are_rejected(self):
        thresholds = HealthThresholds(weights={
            "candidate_volume": 40, "application_rate": 30, "time_to_fill": 20, "diversity_ratio": 9,
        })
        violations = metrics.validate_thresholds(thresholds)
        assert violations == ["Metric weights must sum to 100, currently sum to 99"]

    def test_all_rules_reported_together(self):
        thresholds = HealthThresholds(
            healthy_score_min=60,
            warning_score_min=60,
            min_diversity_ratio=0.1,
            critical_diversity_ratio=0.1,
            weights={"candidate_volume": 50, "application_rate": 30, "time_to_fill": 20, "diversity_ratio": 10},
        )
        violations = metrics.validate_thresholds(thresholds)
        assert violations == [
            "Metric weights must sum to 100, currently sum to 110",
            "Warning score minimum must be less than healthy score minimum",
            "Critical diversity ratio must be less than minimum diversity ratio",
        ]

    def test_bounds_checks(self):
        assert metrics.is_valid_health_score(100)
        assert not metrics.is_valid_health_score(101)
        assert not metrics.is_valid_percentage(-1)


class TestSummaryAndDisplay:

    @pytest.mark.parametrize("candidates,jobs,expected", [(10, 4, 2.5), (1, 3, 0.33), (5, 0, 0.0)])
    def test_candidate_to_job_ratio(self, candidates, jobs, expected):
        assert metrics.candidate_to_job_ratio(candidates, jobs) == expected

    @pytest.mark.parametrize("hired,total,expected", [(1, 3, 33.3), (0, 0, 0.0), (2, 8, 25.0)])
    def test_conversion_rate(self, hired, total, expected):
        assert metrics.conversion_rate(hired, total) == expected

    def test_formatting(self):
        assert metrics.format_health_score(61.5) == "62%"
        assert metrics.format_percentage(33.3) == "33%"
        assert metrics.format_ratio(2.5) == "2.50:1"
        assert metrics.format_days(12.4) == "12d"

    def test_colors_and_labels(self):
        assert metrics.health_color("healthy") == "#00c851"
        assert metrics.health_color("CRITICAL") == "#ff4444"
        assert metrics.health_color("bogus") == "#6c757d"
        assert metrics.status_label("warning") == "Needs Attention"
        assert metrics.status_label("bogus") == "Unknown"
