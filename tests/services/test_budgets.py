from __future__ import annotations

from bundlescope.config.schema import AppConfig
from bundlescope.services.analyzer import analyze
from bundlescope.services.budgets import (
    GZIP_BUDGET_EXIT,
    INITIAL_BUDGET_EXIT,
    budget_exit_code,
    compare_metrics,
    evaluate_budgets,
    large_modules,
)
from tests.factories import make_document

_MB = 1024 * 1024


def _result(gzip: int = 0, initial: int = 0, modules: list[dict] | None = None):  # noqa: ANN202
    return analyze(
        make_document(
            assets=[{"size": 10 * _MB, "gzipSize": gzip}],
            modules=modules or [],
            chunks=[{"id": 0, "size": initial, "initial": True}],
        )
    )


class TestEvaluateBudgets:
    def test_no_thresholds(self) -> None:
        assert evaluate_budgets(_result(gzip=5 * _MB), AppConfig()) == []

    def test_gzip_violation(self) -> None:
        [violation] = evaluate_budgets(_result(gzip=2 * _MB), AppConfig(max_gzip_size=1.5))
        assert violation.exit_code == GZIP_BUDGET_EXIT
        assert violation.message == "Bundle gzip size (2.00MB) exceeds threshold (1.5MB)."

    def test_initial_violation(self) -> None:
        violations = evaluate_budgets(_result(initial=3 * _MB), AppConfig(max_initial_size=1))
        assert [v.exit_code for v in violations] == [INITIAL_BUDGET_EXIT]

    def test_within_budget(self) -> None:
        config = AppConfig(max_gzip_size=5, max_initial_size=5)
        assert evaluate_budgets(_result(gzip=_MB, initial=_MB), config) == []

    def test_exit_code_is_max(self) -> None:
        config = AppConfig(max_gzip_size=1, max_initial_size=1)
        violations = evaluate_budgets(_result(gzip=2 * _MB, initial=2 * _MB), config)
        assert budget_exit_code(violations) == INITIAL_BUDGET_EXIT
        assert budget_exit_code([]) == 0


class TestCompareMetrics:
    def test_deltas(self) -> None:
        baseline = _result(gzip=_MB).metrics
        current = _result(gzip=2 * _MB, modules=[{"name": "a.js", "size": 1}]).metrics
        deltas = compare_metrics(current, baseline)
        assert deltas["totalGzipSize"].describe() == "+1.00MB vs baseline"
        assert deltas["moduleCount"].describe() == "+1 vs baseline"
        assert deltas["totalSize"].describe() == ""
        assert deltas["chunkCount"].describe() == ""

    def test_shrinking(self) -> None:
        deltas = compare_metrics(_result(gzip=_MB).metrics, _result(gzip=3 * _MB).metrics)
        assert deltas["totalGzipSize"].describe() == "-2.00MB vs baseline"

    def test_tiny_byte_delta_hidden(self) -> None:
        deltas = compare_metrics(_result(gzip=_MB + 100).metrics, _result(gzip=_MB).metrics)
        assert not deltas["totalGzipSize"].is_significant


class TestLargeModules:
    def test_threshold_inclusive(self) -> None:
        result = _result(modules=[{"name": "a.js", "size": _MB}, {"name": "b.js", "size": _MB // 100}])
        assert [m.name for m in large_modules(result, 10)] == ["a.js"]

    def test_non_finite_threshold_falls_back(self) -> None:
        result = _result(modules=[{"name": "a.js", "size": _MB}, {"name": "b.js", "size": _MB // 100}])
        assert [m.name for m in large_modules(result, float("nan"))] == ["a.js"]
