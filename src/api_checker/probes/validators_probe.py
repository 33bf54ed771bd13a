from typing import List

from api_checker.abstractions.probe import Probe
from api_checker.contracts.beacon import ValidatorSummary
from api_checker.contracts.probe_run import ProbeKind, RequestParameters
from api_checker.core.beacon_client import BeaconClient


class ValidatorsProbe(Probe):
    """
    Cross-checks validator summaries (index, balance, status and record) for a
    random validator subset at a random state.
    """

    kind = ProbeKind.VALIDATORS

    async def fetch(
        self, client: BeaconClient, params: RequestParameters
    ) -> List[ValidatorSummary]:
        return await client.get_validators(params.state_id, params.indices, ())
