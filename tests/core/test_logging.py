"""Tests for scoped logging context."""

from feature_xray.comparison import Comparator
from feature_xray.core.logging import _add_run_context, log_context
from feature_xray.core.models import MaxCost, Options, QueryCost
from feature_xray.extraction import FeatureExtractor
from feature_xray.features import DefaultFeatureComputer


class TestLogContext:
    """Tests for log_context and the processor that applies it."""

    def test_context_added_inside_block(self):
        with log_context(comparison="table:1/table:2"):
            event = _add_run_context(None, "info", {"event": "features_extracted"})

        assert event == {"event": "features_extracted", "comparison": "table:1/table:2"}

    def test_context_removed_after_block(self):
        with log_context(comparison="table:1/table:2"):
            pass

        assert _add_run_context(None, "info", {"event": "e"}) == {"event": "e"}

    def test_nested_contexts_merge(self):
        with log_context(comparison="outer", command="compare"):
            with log_context(comparison="inner"):
                event = _add_run_context(None, "info", {"event": "e"})

        assert event == {"event": "e", "comparison": "inner", "command": "compare"}


class ContextRecordingExtractor(FeatureExtractor):
    """Records the logging context seen by each extraction."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.contexts = []

    def extract(self, options, model):
        self.contexts.append(_add_run_context(None, "debug", {}))
        return super().extract(options, model)


class TestComparisonContext:
    def test_extractions_tagged_with_comparison(self, fake_source, orders_table):
        extractor = ContextRecordingExtractor(fake_source, DefaultFeatureComputer())
        comparator = Comparator(extractor, parallel=False)

        comparator.compare(_options(), orders_table, fake_source.table(20))

        assert extractor.contexts == [{"comparison": "table:10/table:20"}] * 2

    def test_context_reaches_worker_threads(self, fake_source, orders_table):
        extractor = ContextRecordingExtractor(fake_source, DefaultFeatureComputer())
        comparator = Comparator(extractor, parallel=True)

        comparator.compare(_options(), orders_table, fake_source.table(20))

        assert extractor.contexts == [{"comparison": "table:10/table:20"}] * 2


def _options():
    return Options(max_cost=MaxCost(query=QueryCost.SAMPLE))
