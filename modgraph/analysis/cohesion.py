"""
Cohesion scoring for files in a dependency graph.

Each file gets a raw and a median-normalized cohesion score derived
from three signals:
- Line count
- Number of components and utilities it declares
- Number of internal dependencies it imports

Higher scores mean more cohesive: small files with few declarations
and few internal dependencies. Raw scores compare across
repositories, normalized scores compare within one.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

from ..core.entities import NodeType
from ..graph.module_graph import DependencyGraph
from . import statistics
from .statistics import ScoreMap, median


@dataclass
class CohesionWeights:
    """Weights applied to the signal vector, in signal order."""
    line_count: float = 0.1
    component_utility_count: float = 1.0
    dependency_count: float = 0.5

    def as_list(self) -> List[float]:
        return [self.line_count, self.component_utility_count, self.dependency_count]

    def to_dict(self) -> Dict[str, float]:
        return {
            "line_count": self.line_count,
            "component_utility_count": self.component_utility_count,
            "dependency_count": self.dependency_count
        }


DEFAULT_WEIGHTS = CohesionWeights()


def normalize(value: float, median_value: float) -> float:
    """
    Scale a signal by its cross-file median.

    A result > 1 means above the median, < 1 below it. A zero median
    normalizes to 0.
    """
    if median_value == 0:
        return 0.0
    return value / median_value


def weighted_sum(signals: List[float], weights: CohesionWeights = DEFAULT_WEIGHTS) -> float:
    return sum(value * weight for value, weight in zip(signals, weights.as_list()))


def calc_cohesion_score(signals: List[float], weights: CohesionWeights = DEFAULT_WEIGHTS) -> float:
    """
    Score = 1 / weighted sum of the signals.

    A weighted sum keeps the weights easy to tune and is less
    sensitive to a single extreme signal than a product. A zero sum
    scores +inf.
    """
    total = weighted_sum(signals, weights)
    if total == 0:
        return math.inf
    return 1 / total


class CohesionAnalyzer:
    """
    Computes cohesion scores for every file node of a finished graph.

    The graph is only read. Scores are kept as file key ->
    (raw, normalized) tuples.
    """

    def __init__(self, graph: DependencyGraph, weights: CohesionWeights = DEFAULT_WEIGHTS):
        self.graph = graph
        self.weights = weights
        self.cohesion_scores: Dict[str, Tuple[float, float]] = {}
        self.signals: Dict[str, List[float]] = {}

    def _component_utility_count(self, file_key: str) -> int:
        count = 0
        for neighbor in self.graph.neighbors(file_key):
            node = self.graph.get_node(neighbor)
            if node.type in (NodeType.COMPONENT, NodeType.UTILITY):
                count += 1
        return count

    def collect_signals(self) -> Dict[str, List[float]]:
        """Raw signal vector per file: [lines, declarations, dependencies]."""
        signals = {}
        for key, node in self.graph.items():
            if node.type != NodeType.FILE:
                continue
            signals[key] = [
                node.line_count,
                self._component_utility_count(key),
                # Recorded specifiers, not out-degree: failed resolutions still count
                len(node.dependencies)
            ]
        return signals

    def analyze(self) -> Dict[str, Tuple[float, float]]:
        """
        Score every file.

        Returns:
            Dict of file key -> (raw_score, normalized_score)
        """
        self.signals = self.collect_signals()
        self.cohesion_scores = {}

        columns = list(zip(*self.signals.values()))
        medians = [median(list(column)) for column in columns]

        for key, raw in self.signals.items():
            normalized = [normalize(value, medians[i]) for i, value in enumerate(raw)]
            self.cohesion_scores[key] = (
                calc_cohesion_score(raw, self.weights),
                calc_cohesion_score(normalized, self.weights)
            )

        return self.get_cohesion_scores()

    def get_cohesion_scores(self) -> Dict[str, Tuple[float, float]]:
        return dict(self.cohesion_scores)

    def get_raw_scores(self) -> ScoreMap:
        return {key: scores[0] for key, scores in self.cohesion_scores.items()}

    def get_normalized_scores(self) -> ScoreMap:
        return {key: scores[1] for key, scores in self.cohesion_scores.items()}

    # ─── Statistics ───────────────────────────────

    def get_average_score(self, scores: ScoreMap) -> float:
        return statistics.mean_score(scores)

    def get_median_score(self, scores: ScoreMap) -> float:
        return statistics.median_score(scores)

    def get_scores_below_percentile(self, scores: ScoreMap, percentile: float) -> ScoreMap:
        return statistics.scores_below_percentile(scores, percentile)

    def get_least_cohesive(self, scores: ScoreMap) -> ScoreMap:
        return statistics.least_cohesive(scores)

    def get_most_cohesive(self, scores: ScoreMap) -> ScoreMap:
        return statistics.most_cohesive(scores)

    def detect_outliers(self, scores: ScoreMap) -> ScoreMap:
        return statistics.detect_outliers(scores)

    def prune_outliers(self, scores: ScoreMap) -> ScoreMap:
        return statistics.prune_outliers(scores)

    def get_statistics(self, percentile: float = 0.25) -> Dict:
        """Summaries for both the raw and the normalized score maps."""
        return {
            "weights": self.weights.to_dict(),
            "raw": statistics.summarize(self.get_raw_scores(), percentile),
            "normalized": statistics.summarize(self.get_normalized_scores(), percentile)
        }
