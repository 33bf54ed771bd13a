from api_checker.abstractions.probe import Probe
from api_checker.contracts.probe_run import ProbeKind, RequestParameters
from api_checker.core.beacon_client import BeaconClient


class StateRootProbe(Probe):
    kind = ProbeKind.STATE_ROOT

    async def fetch(self, client: BeaconClient, params: RequestParameters) -> str:
        return await client.get_state_root(params.state_id)
