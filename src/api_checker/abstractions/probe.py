import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel

from api_checker.contracts.probe_run import (
    ProbeKind,
    ProbeResult,
    ProbeRun,
    RequestParameters,
)
from api_checker.core.beacon_client import BeaconClient
from api_checker.core.comparison import (
    COMPARATORS,
    find_first_mismatch,
    median,
    sort_by_index,
)
from api_checker.core.endpoint_health import EndpointHealthTracker
from api_checker.core.errors import EndpointError
from api_checker.core.metrics_sink import MetricsSink

logger = logging.getLogger(__name__)


def dump_payload(value: Any) -> str:
    """Serialize a decoded payload for divergence logs."""
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    if isinstance(value, list):
        return json.dumps(
            [v.model_dump(mode="json") if isinstance(v, BaseModel) else v for v in value]
        )
    return json.dumps(value, default=str)


class Probe(ABC):
    """
    Abstract base class for a cross-endpoint check of one API call kind.

    Subclasses only say which call to make; the shared ``run`` queries every
    endpoint in order, aggregates latency and reports the first divergence.
    """

    kind: ProbeKind

    def __init__(
        self,
        metrics: MetricsSink,
        timeout: float = 10.0,
        health: Optional[EndpointHealthTracker] = None,
    ):
        self.metrics = metrics
        self.timeout = timeout
        self.health = health
        self.comparator = COMPARATORS[self.kind]

    @property
    def name(self) -> str:
        return self.kind.value

    @abstractmethod
    async def fetch(self, client: BeaconClient, params: RequestParameters) -> Any:
        """
        Issue this probe's typed call against a single endpoint.

        Args:
            client (BeaconClient): Client bound to the endpoint.
            params (RequestParameters): Parameters shared by every endpoint in the run.

        Returns:
            The decoded payload.
        """

    async def _call_endpoint(
        self, client: BeaconClient, params: RequestParameters
    ) -> ProbeResult:
        start = time.perf_counter()
        try:
            value = await asyncio.wait_for(self.fetch(client, params), self.timeout)
        except asyncio.TimeoutError:
            error = f"timed out after {self.timeout}s"
        except EndpointError as e:
            error = e.detail
        except Exception as e:
            error = f"unexpected {type(e).__name__}: {e}"
        else:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            if self.health:
                self.health.record_success(client.base_url)
            return ProbeResult.success(client.base_url, value, elapsed_ms)

        logger.warning(f"[{self.name}] request to {client.base_url} failed: {error}")
        self.metrics.record_endpoint_error(self.kind, client.base_url)
        if self.health:
            self.health.record_failure(client.base_url)
        return ProbeResult.failure(client.base_url, error)

    async def run(
        self, clients: Sequence[BeaconClient], params: RequestParameters
    ) -> ProbeRun:
        """
        Query every endpoint with the same parameters and compare the answers.
        """
        if self.health:
            allowed = set(self.health.select([c.base_url for c in clients]))
            clients = [c for c in clients if c.base_url in allowed]

        results: List[ProbeResult] = []
        for client in clients:
            results.append(await self._call_endpoint(client, params))

        run = ProbeRun(kind=self.kind, params=params, results=results)
        successes = run.successes
        run.median_latency_ms = median([r.latency_ms for r in successes])
        self.metrics.record_latency(self.kind, run.median_latency_ms)

        if len(successes) < 2:
            logger.warning(
                f"[{self.name}] only {len(successes)} of {len(results)} endpoints "
                f"responded; nothing to compare ({params.describe()})"
            )
            return run

        ordered = [
            ProbeResult.success(r.endpoint, sort_by_index(r.value), r.latency_ms)
            for r in successes
        ]
        run.mismatch = find_first_mismatch(ordered, self.comparator)
        if run.mismatch is not None:
            self.metrics.record_mismatch(self.kind)
            logger.warning(
                f"[{self.name}] responses differ between {run.mismatch.first_endpoint} "
                f"and {run.mismatch.second_endpoint} ({params.describe()}): "
                f"{run.mismatch.first_endpoint}={dump_payload(run.mismatch.first_value)} "
                f"{run.mismatch.second_endpoint}={dump_payload(run.mismatch.second_value)}"
            )
        else:
            logger.info(
                f"[{self.name}] {len(successes)} endpoints agree "
                f"(median latency {run.median_latency_ms:.1f}ms, {params.describe()})"
            )
        return run
