"""
Tests for cohesion scoring and score statistics.
"""

import math

import pytest

from modgraph.analysis import (
    CohesionAnalyzer,
    CohesionWeights,
    calc_cohesion_score,
    detect_outliers,
    least_cohesive,
    mean_score,
    median_score,
    most_cohesive,
    normalize,
    prune_outliers,
    scores_below_percentile,
    summarize
)
from modgraph.core.entities import ComponentNode, ImportRecord, SourceFile, UtilityNode
from modgraph.graph import build_dependency_graph


ROOT = "/repo"


def _file(name, line_count, declarations, dependencies):
    path = f"{ROOT}/src/{name}"
    decls = [UtilityNode(name=f"{name}_{i}", file_path=path) for i in range(declarations)]
    imports = [ImportRecord(module_specifier=f"./dep{i}") for i in range(dependencies)]
    return SourceFile(
        file_path=path,
        line_count=line_count,
        imports=imports,
        dependencies=[i.module_specifier for i in imports],
        declarations=decls
    )


@pytest.fixture
def three_file_graph():
    return build_dependency_graph([
        _file("small.tsx", 10, 1, 0),
        _file("medium.tsx", 20, 2, 1),
        _file("large.tsx", 30, 3, 2),
    ], ROOT)


def test_signals_per_file(three_file_graph):
    analyzer = CohesionAnalyzer(three_file_graph)

    signals = analyzer.collect_signals()

    assert signals[f"{ROOT}/src/small.tsx"] == [10, 1, 0]
    assert signals[f"{ROOT}/src/medium.tsx"] == [20, 2, 1]
    assert signals[f"{ROOT}/src/large.tsx"] == [30, 3, 2]


def test_raw_and_normalized_scores(three_file_graph):
    analyzer = CohesionAnalyzer(three_file_graph)

    scores = analyzer.analyze()

    raw, normalized = scores[f"{ROOT}/src/medium.tsx"]
    assert raw == pytest.approx(1 / (20 * 0.1 + 2 * 1.0 + 1 * 0.5))
    # Every signal equals its median, so each normalizes to exactly 1
    assert normalized == pytest.approx(1 / (0.1 + 1.0 + 0.5))

    raw_scores = analyzer.get_raw_scores()
    assert raw_scores[f"{ROOT}/src/small.tsx"] > raw_scores[f"{ROOT}/src/large.tsx"]


def test_scoring_twice_is_identical(three_file_graph):
    analyzer = CohesionAnalyzer(three_file_graph)

    first = analyzer.analyze()
    second = analyzer.analyze()

    assert first == second
    assert CohesionAnalyzer(three_file_graph).analyze() == first


def test_dependency_signal_counts_recorded_specifiers():
    # Unresolvable imports still count even though they link to placeholders
    source = _file("a.tsx", 5, 0, 3)
    source.imports.append(ImportRecord(module_specifier="react"))
    graph = build_dependency_graph([source], ROOT)

    signals = CohesionAnalyzer(graph).collect_signals()

    assert signals[source.file_path][2] == 3


def test_component_neighbors_counted():
    path = f"{ROOT}/src/a.tsx"
    source = SourceFile(file_path=path, line_count=3, declarations=[
        ComponentNode(name="A", file_path=path),
        UtilityNode(name="b", file_path=path),
    ])
    graph = build_dependency_graph([source], ROOT)

    assert CohesionAnalyzer(graph).collect_signals()[path] == [3, 2, 0]


def test_normalize_zero_median():
    assert normalize(5, 0) == 0
    assert normalize(4, 2) == 2
    assert normalize(2, 2) == 1


def test_zero_weighted_sum_scores_infinity():
    assert calc_cohesion_score([0, 0, 0]) == math.inf

    graph = build_dependency_graph([_file("empty.tsx", 0, 0, 0)], ROOT)
    raw, normalized = CohesionAnalyzer(graph).analyze()[f"{ROOT}/src/empty.tsx"]
    assert raw == math.inf
    assert normalized == math.inf


def test_custom_weights():
    weights = CohesionWeights(line_count=0, component_utility_count=0, dependency_count=1)
    assert calc_cohesion_score([100, 100, 4], weights) == 0.25


def test_empty_graph_has_no_scores():
    graph = build_dependency_graph([], ROOT)
    analyzer = CohesionAnalyzer(graph)

    assert analyzer.analyze() == {}
    assert math.isnan(analyzer.get_average_score(analyzer.get_raw_scores()))


# ─── Statistics ───────────────────────────────


def test_mean_skips_non_finite():
    scores = {"a": 1.0, "b": 3.0, "c": math.inf, "d": math.nan}
    assert mean_score(scores) == 2.0
    assert math.isnan(mean_score({}))


def test_median_takes_upper_middle():
    assert median_score({"a": 4, "b": 1, "c": 3, "d": 2}) == 3
    assert median_score({"a": 5, "b": 1, "c": 3}) == 3
    assert math.isnan(median_score({}))


def test_scores_below_percentile():
    scores = {"a": 1, "b": 2, "c": 3, "d": 4}

    assert scores_below_percentile(scores, 0.5) == {"a": 1}
    assert scores_below_percentile(scores, 1) == {"a": 1, "b": 2, "c": 3}
    assert scores_below_percentile(scores, 0) == {}
    assert scores_below_percentile({}, 0.5) == {}


@pytest.mark.parametrize("percentile", [-0.1, 1.5])
def test_percentile_out_of_range_is_rejected(percentile):
    with pytest.raises(ValueError):
        scores_below_percentile({"a": 1}, percentile)


def test_percentile_monotonicity():
    scores = {f"f{i}": float((i * 7) % 11) for i in range(25)}
    steps = [0, 0.1, 0.25, 0.4, 0.5, 0.75, 0.9, 1]

    for low, high in zip(steps, steps[1:]):
        below_low = scores_below_percentile(scores, low)
        below_high = scores_below_percentile(scores, high)
        assert set(below_low).issubset(below_high)


def test_least_and_most_cohesive_include_ties():
    scores = {"a": 1, "b": 1, "c": 5, "d": 5, "e": math.inf}

    assert least_cohesive(scores) == {"a": 1, "b": 1}
    assert most_cohesive(scores) == {"c": 5, "d": 5}
    assert least_cohesive({}) == {}


def test_outlier_detection():
    scores = {"a": 1, "b": 2, "c": 3, "d": 4, "e": 100}

    assert detect_outliers(scores) == {"e": 100}
    assert prune_outliers(scores) == {"a": 1, "b": 2, "c": 3, "d": 4}


def test_uniform_scores_have_no_outliers():
    assert detect_outliers({"a": 2, "b": 2, "c": 2, "d": 2}) == {}
    assert detect_outliers({}) == {}


def test_summarize(three_file_graph):
    analyzer = CohesionAnalyzer(three_file_graph)
    analyzer.analyze()

    summary = summarize(analyzer.get_raw_scores())

    assert summary["count"] == 3
    assert list(summary["most_cohesive"]) == [f"{ROOT}/src/small.tsx"]
    assert list(summary["least_cohesive"]) == [f"{ROOT}/src/large.tsx"]

    stats = analyzer.get_statistics()
    assert stats["weights"]["component_utility_count"] == 1.0
    assert stats["normalized"]["count"] == 3
