"""
Analysis module - cohesion scoring and score statistics.
"""

from .statistics import (
    ScoreMap,
    mean_score,
    median_score,
    percentile_cutoff,
    scores_below_percentile,
    least_cohesive,
    most_cohesive,
    detect_outliers,
    prune_outliers,
    summarize
)

from .cohesion import (
    CohesionWeights,
    DEFAULT_WEIGHTS,
    CohesionAnalyzer,
    normalize,
    calc_cohesion_score
)

__all__ = [
    # Statistics
    "ScoreMap",
    "mean_score",
    "median_score",
    "percentile_cutoff",
    "scores_below_percentile",
    "least_cohesive",
    "most_cohesive",
    "detect_outliers",
    "prune_outliers",
    "summarize",
    # Cohesion
    "CohesionWeights",
    "DEFAULT_WEIGHTS",
    "CohesionAnalyzer",
    "normalize",
    "calc_cohesion_score",
]
