from api_checker.abstractions.probe import Probe
from api_checker.contracts.beacon import FinalityCheckpoints
from api_checker.contracts.probe_run import ProbeKind, RequestParameters
from api_checker.core.beacon_client import BeaconClient


class FinalityCheckpointsProbe(Probe):
    kind = ProbeKind.FINALITY_CHECKPOINTS

    async def fetch(
        self, client: BeaconClient, params: RequestParameters
    ) -> FinalityCheckpoints:
        return await client.get_finality_checkpoints(params.state_id)
