from __future__ import annotations
import math
from typing import Dict, Optional

from basketballShotCoach import logger
from basketballShotCoach.constants import (
    CLOSER, BIGGER, SMALLER, MIN_TOLERANCE, NOT_DETECTED, UNIT_LABELS,
)
from basketballShotCoach.entity.config_entity import ScoringConfig, ScoreRule
from basketballShotCoach.entity.feature_entity import ShotFeatures, SubScore, BucketScore, ScoreResult

POLICIES = (CLOSER, BIGGER, SMALLER)


def clamp(x: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return max(lo, min(hi, x))


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def is_num(x) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool) and math.isfinite(x)


def worst_bound(rule: ScoreRule) -> float:
    """Value at which a smaller-is-better rule has fallen to the floor."""
    t = rule.target
    if rule.worst is not None:
        worst = rule.worst
    elif rule.tolerance > 0:
        worst = t + rule.tolerance
    else:
        worst = t * rule.worst_multiplier
    return worst if worst > t else t + MIN_TOLERANCE


def score_by_rule(value: Optional[float], rule: ScoreRule, floor: float) -> float:
    """
    0..100 (unrounded) for one measurement.
      closer:  100 at target, linear down to floor at |diff| == tolerance, floor beyond
      bigger:  100 from target up, linear from 0 at value 0, never below floor
      smaller: 100 up to target, linear down to floor at worst_bound(rule)
    An unknown value scores the floor for every policy.
    """
    if not is_num(value):
        return floor
    t = rule.target

    if rule.policy == CLOSER:
        tol = max(MIN_TOLERANCE, rule.tolerance)
        diff = abs(value - t)
        if diff >= tol:
            return floor
        return clamp(max(floor, 100.0 * (1.0 - diff / tol)))

    if rule.policy == BIGGER:
        if value >= t:
            return 100.0
        if t <= 0:
            return floor
        return clamp(max(floor, 100.0 * value / t))

    if rule.policy == SMALLER:
        if value <= t:
            return 100.0
        worst = worst_bound(rule)
        if value >= worst:
            return floor
        return clamp(max(floor, 100.0 * (1.0 - (value - t) / (worst - t))))

    raise ValueError(f"Unknown scoring policy: {rule.policy!r}")


def format_value(value: Optional[float], rule: ScoreRule) -> str:
    """172.48 deg -> '172.48度', 0.2868 pct -> '28.68%', None -> '未检测'"""
    if not is_num(value):
        return NOT_DETECTED
    mult, suffix = UNIT_LABELS.get(rule.unit, (1.0, rule.unit))
    return f"{value * mult:.{int(rule.decimals)}f}{suffix}"


class ShotScorer:
    """Feature vector -> per-item, per-bucket and total integer scores (all in [0,100])."""
    def __init__(self, config: ScoringConfig):
        self.config = config

    def score_item(self, value: Optional[float], rule: ScoreRule) -> SubScore:
        raw = score_by_rule(value, rule, float(self.config.params_floor))
        return SubScore(
            score=int(clamp(round_half_up(raw))),
            value=format_value(value, rule),
            unit=rule.unit,
            raw=value if is_num(value) else None,
        )

    def score(self, features: ShotFeatures) -> ScoreResult:
        buckets: Dict[str, BucketScore] = {}
        weights: Dict[str, float] = {}
        known = set(ShotFeatures.names())

        for bucket in self.config.buckets:
            items: Dict[str, SubScore] = {}
            for item in bucket.items:
                if item.rule.policy not in POLICIES or item.feature not in known:
                    msg = f"bad scoring item {bucket.name}.{item.key}: feature={item.feature!r} policy={item.rule.policy!r}"
                    if self.config.params_strict:
                        raise ValueError(msg)
                    logger.warning(msg + " (skipped)")
                    continue
                items[item.key] = self.score_item(features.value(item.feature), item.rule)

            bucket_score = round_half_up(sum(s.score for s in items.values()) / len(items)) if items else 0
            buckets[bucket.name] = BucketScore(bucket.name, int(clamp(bucket_score)), items)
            weights[bucket.name] = bucket.weight

        total_weight = sum(weights.values())
        if total_weight > 0:
            total = round_half_up(sum(b.score * weights[n] for n, b in buckets.items()) / total_weight)
        else:
            total = 0
        return ScoreResult(total=int(clamp(total)), buckets=buckets)
