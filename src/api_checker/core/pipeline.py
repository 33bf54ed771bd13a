import logging
from enum import Enum
from typing import List, Optional, Sequence

from api_checker.abstractions.probe import Probe
from api_checker.contracts.probe_run import ProbeRun
from api_checker.core.beacon_client import BeaconClient
from api_checker.core.endpoint_health import EndpointHealthTracker
from api_checker.core.parameter_sampler import ParameterSampler
from api_checker.core.profiler import Profiler

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class Pipeline:
    """
    Runs a fixed, ordered list of probes one after another against the same
    set of endpoints.
    """

    def __init__(
        self,
        probes: Sequence[Probe],
        clients: Sequence[BeaconClient],
        sampler: ParameterSampler,
        health: Optional[EndpointHealthTracker] = None,
    ):
        self.probes = list(probes)
        self.clients = list(clients)
        self.sampler = sampler
        self.health = health
        self.state = PipelineState.IDLE
        self.current_probe: Optional[Probe] = None
        self.runs_completed = 0

    @Profiler.profile
    async def run_once(self) -> List[ProbeRun]:
        """
        Execute every probe once in order. A probe that raises is logged and
        skipped so the remaining probes still run.

        Returns:
            List[ProbeRun]: Outcomes of the probes that completed.
        """
        completed: List[ProbeRun] = []
        self.state = PipelineState.RUNNING
        if self.health:
            self.health.start_run()
        try:
            for probe in self.probes:
                self.current_probe = probe
                try:
                    params = self.sampler.sample()
                    completed.append(await probe.run(self.clients, params))
                except Exception:
                    logger.exception(f"Probe {probe.name} failed unexpectedly")
        finally:
            if self.health:
                self.health.end_run()
            self.current_probe = None
            self.state = PipelineState.IDLE
            self.runs_completed += 1
        diverged = [run.kind.value for run in completed if run.diverged]
        logger.info(
            f"Pipeline run {self.runs_completed} finished: {len(completed)}/"
            f"{len(self.probes)} probes completed, diverged={diverged}"
        )
        return completed
