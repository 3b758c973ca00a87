import math
from dataclasses import replace

import pytest

from basketballShotCoach.components.scoring.scorer import (
    ShotScorer, score_by_rule, format_value, round_half_up, worst_bound,
)
from basketballShotCoach.config.configuration import build_score_rule, build_scoring_config
from basketballShotCoach.entity.config_entity import ScoringConfig
from basketballShotCoach.entity.feature_entity import ShotFeatures

FLOOR = 20.0


def rule(**kw):
    item = {"target": 0, "policy": "closer", "unit": "deg"}
    item.update(kw)
    return build_score_rule(item)


@pytest.mark.parametrize("value,expected", [(165, 100), (173, 20), (169, 50), (180, 20), (161, 50)])
def test_closer(value, expected):
    r = rule(target=165, tolerance=8)
    assert round_half_up(score_by_rule(value, r, FLOOR)) == expected


@pytest.mark.parametrize("value,expected", [(130, 50), (260, 100), (400, 100), (0, 20), (26, 20)])
def test_bigger(value, expected):
    r = rule(target=260, policy="bigger", unit="deg/s")
    assert round_half_up(score_by_rule(value, r, FLOOR)) == expected


@pytest.mark.parametrize("value,expected", [(0.02, 100), (0.0, 100), (0.07, 50), (0.13, 20), (0.5, 20)])
def test_smaller_with_multiplier(value, expected):
    r = rule(target=0.02, policy="smaller", unit="pct", worst_multiplier=6)
    assert round_half_up(score_by_rule(value, r, FLOOR)) == expected


def test_smaller_with_explicit_worst():
    r = rule(target=5, policy="smaller", worst=20)
    assert score_by_rule(12.5, r, FLOOR) == pytest.approx(50.0)
    assert score_by_rule(20, r, FLOOR) == FLOOR


def test_worst_bound_rules():
    assert worst_bound(rule(target=5, policy="smaller", worst=20)) == 20
    assert worst_bound(rule(target=5, policy="smaller", tolerance=3)) == 8
    assert worst_bound(rule(target=0.08, policy="smaller")) == pytest.approx(0.4)
    # target 0 with a multiplier collapses; never divide by zero
    assert worst_bound(rule(target=0, policy="smaller")) > 0
    assert score_by_rule(1.0, rule(target=0, policy="smaller"), FLOOR) == FLOOR


@pytest.mark.parametrize("policy", ["closer", "bigger", "smaller"])
@pytest.mark.parametrize("value", [None, float("nan"), float("inf")])
def test_unknown_value_scores_floor(policy, value):
    assert score_by_rule(value, rule(target=10, tolerance=2, policy=policy), FLOOR) == FLOOR


def test_zero_tolerance_closer_is_exact_match_only():
    r = rule(target=10, tolerance=0)
    assert score_by_rule(10, r, FLOOR) == 100.0
    assert score_by_rule(10.001, r, FLOOR) == FLOOR


def test_policy_aliases():
    assert rule(target=1, policy=">=|").policy == "bigger"
    assert rule(target=1, policy="<=|").policy == "smaller"


def test_unknown_policy_raises():
    r = rule(target=1)
    bad = replace(r, policy="closest")
    with pytest.raises(ValueError):
        score_by_rule(1.0, bad, FLOOR)


def test_round_half_up():
    assert round_half_up(49.5) == 50
    assert round_half_up(50.5) == 51
    assert round_half_up(50.49) == 50


@pytest.mark.parametrize("value,kw,expected", [
    (172.48, {"unit": "deg", "decimals": 2}, "172.48度"),
    (0.2868, {"unit": "pct", "decimals": 2}, "28.68%"),
    (260.2, {"unit": "deg/s", "decimals": 0}, "260(度/秒)"),
    (0.4, {"unit": "s", "decimals": 2}, "0.40秒"),
    (None, {"unit": "deg", "decimals": 2}, "未检测"),
    (float("nan"), {"unit": "pct", "decimals": 2}, "未检测"),
    (1.5, {"unit": "px", "decimals": 1}, "1.5px"),
])
def test_format_value(value, kw, expected):
    assert format_value(value, rule(target=1, **kw)) == expected


GOOD = ShotFeatures(
    squat_knee_angle=165.0, knee_ext_speed=300.0,
    release_angle=158.0, arm_power_angle=35.0, follow_duration=0.4, elbow_tightness=0.01,
    sway_percent=0.05, align_angle=2.0,
)


def test_perfect_shot(scoring_config):
    res = ShotScorer(scoring_config).score(GOOD)
    assert res.total == 100
    assert [b for b in res.buckets] == ["lower", "upper", "balance"]
    assert res["lower"]["squat"].value == "165.00度"


def test_empty_features_score_floor_everywhere(scoring_config):
    res = ShotScorer(scoring_config).score(ShotFeatures())
    assert res.total == 20
    for bucket in res.buckets.values():
        assert bucket.score == 20
        for item in bucket.items.values():
            assert item.score == 20
            assert item.value == "未检测"


def test_bucket_is_mean_of_items_and_total_is_mean_of_buckets(scoring_config):
    feats = ShotFeatures(
        squat_knee_angle=169.0, knee_ext_speed=130.0,                    # 50, 50
        release_angle=158.0, arm_power_angle=35.0, follow_duration=0.4,  # 100, 100, 100
        elbow_tightness=0.07,                                            # 50
        sway_percent=None, align_angle=5.0,                              # 20, 100
    )
    res = ShotScorer(scoring_config).score(feats)
    assert res["lower"].score == 50
    assert res["upper"].score == 88      # 87.5 rounds up
    assert res["balance"].score == 60
    assert res.total == 66               # (50 + 88 + 60) / 3 = 66.0


def test_output_shape(scoring_config):
    d = ShotScorer(scoring_config).score(GOOD).to_dict()
    assert set(d) == {"total", "lower", "upper", "balance"}
    assert set(d["lower"]) == {"score", "squat", "kneeExt"}
    assert set(d["upper"]) == {"score", "releaseAngle", "armPower", "follow", "elbowTight"}
    assert set(d["balance"]) == {"score", "center", "align"}
    assert d["balance"]["center"] == {"score": 100, "value": "5.00%"}


def test_bucket_weights():
    cfg = build_scoring_config({"buckets": [
        {"name": "a", "weight": 3, "items": [{"key": "x", "feature": "release_angle", "target": 10, "tolerance": 1, "policy": "closer"}]},
        {"name": "b", "weight": 1, "items": [{"key": "y", "feature": "align_angle", "target": 10, "tolerance": 1, "policy": "closer"}]},
    ]})
    res = ShotScorer(cfg).score(ShotFeatures(release_angle=10.0))
    # (100*3 + 20*1) / 4
    assert res.total == 80


def test_zero_total_weight_gives_zero():
    cfg = build_scoring_config({"buckets": [
        {"name": "a", "weight": 0, "items": [{"key": "x", "feature": "release_angle", "target": 10, "policy": "bigger"}]},
    ]})
    assert ShotScorer(cfg).score(ShotFeatures(release_angle=10.0)).total == 0


def test_unknown_feature_strict_raises():
    cfg = build_scoring_config({"buckets": [
        {"name": "a", "items": [{"key": "x", "feature": "jump_height", "target": 1, "policy": "bigger"}]},
    ]})
    with pytest.raises(ValueError):
        ShotScorer(cfg).score(ShotFeatures())


def test_unknown_feature_lenient_is_skipped():
    cfg = build_scoring_config({"strict": False, "buckets": [
        {"name": "a", "items": [
            {"key": "x", "feature": "jump_height", "target": 1, "policy": "bigger"},
            {"key": "y", "feature": "release_angle", "target": 10, "policy": "bigger"},
        ]},
    ]})
    res = ShotScorer(cfg).score(ShotFeatures(release_angle=5.0))
    assert list(res["a"].items) == ["y"]
    assert res["a"].score == 50


def test_extra_features_can_be_scored():
    cfg = build_scoring_config({"buckets": [
        {"name": "balance", "items": [
            {"key": "comVar", "feature": "com_variance", "target": 0.01, "policy": "smaller", "unit": "pct"},
        ]},
    ]})
    res = ShotScorer(cfg).score(ShotFeatures(com_variance=0.005))
    assert res["balance"]["comVar"].score == 100
    assert res["balance"]["comVar"].value == "0.50%"


def test_scores_always_in_range(scoring_config):
    wild = ShotFeatures(
        squat_knee_angle=-1e9, knee_ext_speed=-5.0, release_angle=1e9, arm_power_angle=math.pi,
        follow_duration=-3.0, elbow_tightness=-1.0, sway_percent=1e6, align_angle=-90.0,
    )
    res = ShotScorer(scoring_config).score(wild)
    assert 0 <= res.total <= 100
    for bucket in res.buckets.values():
        assert 0 <= bucket.score <= 100
        for item in bucket.items.values():
            assert 0 <= item.score <= 100
            assert isinstance(item.score, int)


def test_empty_bucket_scores_zero():
    cfg = ScoringConfig(params_floor=20, params_strict=True, buckets=())
    assert ShotScorer(cfg).score(GOOD).total == 0
