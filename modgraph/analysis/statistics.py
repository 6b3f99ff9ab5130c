"""
Statistics over score maps.

A score map is a dict of file key -> score. Degenerate inputs give
NaN instead of raising; callers filter non-finite values themselves.
"""

import math
from typing import Dict, List


ScoreMap = Dict[str, float]


def _is_valid(value: float) -> bool:
    return value is not None and math.isfinite(value)


def median(values: List[float]) -> float:
    """Classic median: mean of the two middle values for even lengths."""
    if not values:
        return math.nan
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[middle - 1] + ordered[middle]) / 2
    return ordered[middle]


def mean_score(scores: ScoreMap) -> float:
    """Average of the finite scores."""
    valid = [s for s in scores.values() if _is_valid(s)]
    if not valid:
        return math.nan
    return sum(valid) / len(valid)


def median_score(scores: ScoreMap) -> float:
    """Median score; the upper-middle element for even-length input."""
    ordered = sorted(scores.values())
    if not ordered:
        return math.nan
    return ordered[len(ordered) // 2]


def percentile_cutoff(scores: ScoreMap, percentile: float) -> float:
    """
    Value at sorted position ceil(n * p) in ascending order.

    Raises:
        ValueError: if percentile is outside [0, 1]
    """
    if percentile < 0 or percentile > 1:
        raise ValueError("Percentile must be between 0 and 1")
    ordered = sorted(scores.values())
    if not ordered or percentile == 0:
        return math.nan
    return ordered[math.ceil(len(ordered) * percentile) - 1]


def scores_below_percentile(scores: ScoreMap, percentile: float) -> ScoreMap:
    """
    Scores strictly below the given percentile cutoff.

    scores_below_percentile(scores, 0.25) gives the bottom quarter.
    A percentile of 0, or an empty map, gives an empty result.

    Raises:
        ValueError: if percentile is outside [0, 1]
    """
    if percentile < 0 or percentile > 1:
        raise ValueError("Percentile must be between 0 and 1")
    if percentile == 0 or not scores:
        return {}

    cutoff = percentile_cutoff(scores, percentile)
    return {key: score for key, score in scores.items() if score < cutoff}


def least_cohesive(scores: ScoreMap) -> ScoreMap:
    """Entries with the minimum finite score, ties included."""
    valid = [s for s in scores.values() if _is_valid(s)]
    if not valid:
        return {}
    lowest = min(valid)
    return {key: score for key, score in scores.items() if score == lowest}


def most_cohesive(scores: ScoreMap) -> ScoreMap:
    """Entries with the maximum finite score, ties included."""
    valid = [s for s in scores.values() if _is_valid(s)]
    if not valid:
        return {}
    highest = max(valid)
    return {key: score for key, score in scores.items() if score == highest}


def detect_outliers(scores: ScoreMap) -> ScoreMap:
    """
    Outliers by the interquartile range rule.

    Q1 and Q3 are the 25th and 75th percentile cutoffs. Scores outside
    [Q1 - 1.5 * IQR, Q3 + 1.5 * IQR] are outliers. An empty map has
    no outliers.
    """
    if not scores:
        return {}

    q1 = percentile_cutoff(scores, 0.25)
    q3 = percentile_cutoff(scores, 0.75)

    iqr = q3 - q1
    lower_bound = q1 - 1.5 * iqr
    upper_bound = q3 + 1.5 * iqr

    return {
        key: score
        for key, score in scores.items()
        if score < lower_bound or score > upper_bound
    }


def prune_outliers(scores: ScoreMap) -> ScoreMap:
    """The score map with IQR outliers removed."""
    outliers = detect_outliers(scores)
    return {key: score for key, score in scores.items() if key not in outliers}


def summarize(scores: ScoreMap, percentile: float = 0.25) -> Dict:
    """Collect the standard statistics for one score map."""
    return {
        "count": len(scores),
        "mean": mean_score(scores),
        "median": median_score(scores),
        "most_cohesive": most_cohesive(scores),
        "least_cohesive": least_cohesive(scores),
        "below_percentile": {
            "percentile": percentile,
            "scores": scores_below_percentile(scores, percentile)
        },
        "outliers": detect_outliers(scores)
    }
