"""
Probe factory for building the ordered probe list of the pipeline.
"""
import logging
from typing import Dict, List, Optional, Sequence, Type

from api_checker.abstractions.probe import Probe
from api_checker.contracts.probe_run import ProbeKind
from api_checker.core.endpoint_health import EndpointHealthTracker
from api_checker.core.metrics_sink import MetricsSink
from api_checker.probes.balances_probe import BalancesProbe
from api_checker.probes.block_probe import BlockProbe
from api_checker.probes.finality_checkpoints_probe import FinalityCheckpointsProbe
from api_checker.probes.state_root_probe import StateRootProbe
from api_checker.probes.validators_probe import ValidatorsProbe

logger = logging.getLogger(__name__)

PROBE_CLASSES: Dict[ProbeKind, Type[Probe]] = {
    ProbeKind.VALIDATORS: ValidatorsProbe,
    ProbeKind.BALANCES: BalancesProbe,
    ProbeKind.BLOCK: BlockProbe,
    ProbeKind.FINALITY_CHECKPOINTS: FinalityCheckpointsProbe,
    ProbeKind.STATE_ROOT: StateRootProbe,
}


class ProbeFactory:
    """
    Factory class for creating probe instances in configured order.
    """

    @staticmethod
    def create_probe(
        kind: ProbeKind,
        metrics: MetricsSink,
        timeout: float,
        health: Optional[EndpointHealthTracker] = None,
    ) -> Probe:
        """
        Create the probe for a single kind.

        Raises:
            ValueError: If ``kind`` is not a known ProbeKind.
        """
        probe_class = PROBE_CLASSES[ProbeKind(kind)]
        return probe_class(metrics, timeout=timeout, health=health)

    @staticmethod
    def create_pipeline_probes(
        kinds: Sequence[ProbeKind],
        metrics: MetricsSink,
        timeout: float,
        health: Optional[EndpointHealthTracker] = None,
    ) -> List[Probe]:
        probes = [
            ProbeFactory.create_probe(kind, metrics, timeout, health) for kind in kinds
        ]
        logger.info(f"Pipeline probes: {[p.name for p in probes]}")
        return probes
