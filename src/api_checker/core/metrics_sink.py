import logging
from typing import Dict, Iterable, Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from api_checker.config.config import Config
from api_checker.contracts.probe_run import ProbeKind

logger = logging.getLogger(__name__)

LATENCY_BUCKETS_MS = (
    10.0,
    50.0,
    100.0,
    150.0,
    200.0,
    300.0,
    500.0,
    1000.0,
    5000.0,
    10000.0,
    30000.0,
    60000.0,
)


class MetricsSink:
    """
    Per-probe mismatch counters and latency histograms.

    prometheus_client metrics lock internally, so probes may record from any
    task or thread without external locking.
    """

    def __init__(
        self,
        namespace: str = "api_checker",
        registry: Optional[CollectorRegistry] = None,
        probe_kinds: Iterable[ProbeKind] = tuple(ProbeKind),
    ):
        self.namespace = namespace
        self.registry = registry if registry is not None else REGISTRY
        self._unequal: Dict[ProbeKind, Counter] = {}
        self._latency: Dict[ProbeKind, Histogram] = {}
        self._endpoint_errors: Dict[ProbeKind, Counter] = {}
        for kind in probe_kinds:
            self._unequal[kind] = Counter(
                f"{kind.value}_unequal",
                f"Mismatched {kind.value} responses between endpoints",
                namespace=namespace,
                registry=self.registry,
            )
            self._latency[kind] = Histogram(
                f"{kind.value}_latency_milliseconds",
                f"Median latency of {kind.value} API responses in millis",
                namespace=namespace,
                buckets=LATENCY_BUCKETS_MS,
                registry=self.registry,
            )
            self._endpoint_errors[kind] = Counter(
                f"{kind.value}_endpoint_errors",
                f"Failed {kind.value} requests per endpoint",
                ["endpoint"],
                namespace=namespace,
                registry=self.registry,
            )
        self.skipped_ticks = Counter(
            "pipeline_skipped_ticks",
            "Scheduler ticks skipped because the previous run was still executing",
            namespace=namespace,
            registry=self.registry,
        )
        logger.info(f"MetricsSink initialized with namespace '{namespace}'.")

    def record_latency(self, kind: ProbeKind, latency_ms: float):
        self._latency[kind].observe(latency_ms)

    def record_mismatch(self, kind: ProbeKind):
        self._unequal[kind].inc()

    def record_endpoint_error(self, kind: ProbeKind, endpoint: str):
        self._endpoint_errors[kind].labels(endpoint=endpoint).inc()

    def record_skipped_tick(self):
        self.skipped_ticks.inc()

    def mismatch_count(self, kind: ProbeKind) -> float:
        return self._sample_value(f"{kind.value}_unequal_total")

    def latency_observations(self, kind: ProbeKind) -> float:
        return self._sample_value(f"{kind.value}_latency_milliseconds_count")

    def latency_sum(self, kind: ProbeKind) -> float:
        return self._sample_value(f"{kind.value}_latency_milliseconds_sum")

    def endpoint_error_count(self, kind: ProbeKind, endpoint: str) -> float:
        return self._sample_value(
            f"{kind.value}_endpoint_errors_total", {"endpoint": endpoint}
        )

    def _sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> float:
        full_name = f"{self.namespace}_{name}" if self.namespace else name
        value = self.registry.get_sample_value(full_name, labels or {})
        return value or 0.0


_default_sink: Optional[MetricsSink] = None


def get_default_sink() -> MetricsSink:
    """
    Return the process-lifetime sink registered on the global Prometheus registry.
    """
    global _default_sink
    if _default_sink is None:
        _default_sink = MetricsSink(namespace=Config.METRICS_NAMESPACE)
    return _default_sink
