from __future__ import annotations

from datetime import UTC, datetime

import pytest

from bundlescope.models.report import AnalysisResult
from bundlescope.services.analyzer import analyze
from tests.factories import make_document


@pytest.fixture
def result() -> AnalysisResult:
    doc = make_document(
        assets=[{"name": "main.js", "size": 10000, "gzipSize": 3000}],
        modules=[
            {
                "name": "node_modules/lodash/index.js",
                "size": 5000,
                "source": "module.exports = {}",
                "reasons": ["harmony import src/app.js"],
            },
            {"name": "node_modules/lodash/clone.js", "size": 2000},
            {"name": "src/app.js", "size": 3000, "reasons": ["entry"]},
        ],
        chunks=[
            {
                "id": 0,
                "name": "main",
                "initial": True,
                "size": 10000,
                "modules": [{"name": "node_modules/lodash/clone.js"}],
            }
        ],
    )
    return analyze(doc, clock=lambda: datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC))


@pytest.fixture
def empty_result() -> AnalysisResult:
    return analyze(
        make_document(assets=[{"size": 100}]),
        clock=lambda: datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC),
    )
