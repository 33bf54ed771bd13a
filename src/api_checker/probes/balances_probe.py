from typing import List

from api_checker.abstractions.probe import Probe
from api_checker.contracts.beacon import BalanceSummary
from api_checker.contracts.probe_run import ProbeKind, RequestParameters
from api_checker.core.beacon_client import BeaconClient


class BalancesProbe(Probe):
    kind = ProbeKind.BALANCES

    async def fetch(
        self, client: BeaconClient, params: RequestParameters
    ) -> List[BalanceSummary]:
        return await client.get_balances(params.state_id, params.indices)
