import threading
import unittest

from prometheus_client import CollectorRegistry, generate_latest

from api_checker.contracts.probe_run import ProbeKind
from api_checker.core.metrics_sink import LATENCY_BUCKETS_MS, MetricsSink, get_default_sink


class TestMetricsSink(unittest.TestCase):
    def setUp(self):
        self.registry = CollectorRegistry()
        self.sink = MetricsSink(registry=self.registry)

    def test_metric_names_per_probe_kind(self):
        exposition = generate_latest(self.registry).decode()
        for kind in ProbeKind:
            self.assertIn(f"api_checker_{kind.value}_unequal_total", exposition)
            self.assertIn(f"api_checker_{kind.value}_latency_milliseconds_bucket", exposition)

    def test_latency_buckets(self):
        self.assertEqual(
            list(LATENCY_BUCKETS_MS),
            [10, 50, 100, 150, 200, 300, 500, 1000, 5000, 10000, 30000, 60000],
        )
        self.sink.record_latency(ProbeKind.BLOCK, 120.0)
        self.assertEqual(
            self.registry.get_sample_value(
                "api_checker_block_latency_milliseconds_bucket", {"le": "150.0"}
            ),
            1,
        )
        self.assertEqual(
            self.registry.get_sample_value(
                "api_checker_block_latency_milliseconds_bucket", {"le": "100.0"}
            ),
            0,
        )

    def test_counters_are_independent_per_kind(self):
        self.sink.record_mismatch(ProbeKind.BALANCES)
        self.sink.record_mismatch(ProbeKind.BALANCES)
        self.assertEqual(self.sink.mismatch_count(ProbeKind.BALANCES), 2)
        self.assertEqual(self.sink.mismatch_count(ProbeKind.VALIDATORS), 0)

    def test_endpoint_errors_labelled_by_endpoint(self):
        self.sink.record_endpoint_error(ProbeKind.STATE_ROOT, "http://a")
        self.assertEqual(self.sink.endpoint_error_count(ProbeKind.STATE_ROOT, "http://a"), 1)
        self.assertEqual(self.sink.endpoint_error_count(ProbeKind.STATE_ROOT, "http://b"), 0)

    def test_concurrent_increments_need_no_external_lock(self):
        def bump():
            for _ in range(1000):
                self.sink.record_mismatch(ProbeKind.VALIDATORS)
                self.sink.record_latency(ProbeKind.VALIDATORS, 5.0)

        threads = [threading.Thread(target=bump) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(self.sink.mismatch_count(ProbeKind.VALIDATORS), 4000)
        self.assertEqual(self.sink.latency_observations(ProbeKind.VALIDATORS), 4000)

    def test_custom_namespace(self):
        registry = CollectorRegistry()
        sink = MetricsSink(namespace="holesky", registry=registry)
        sink.record_mismatch(ProbeKind.BLOCK)
        self.assertEqual(registry.get_sample_value("holesky_block_unequal_total"), 1)

    def test_default_sink_is_process_wide(self):
        self.assertIs(get_default_sink(), get_default_sink())


if __name__ == "__main__":
    unittest.main()
