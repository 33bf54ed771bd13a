from api_checker.abstractions.probe import Probe
from api_checker.contracts.beacon import SignedBeaconBlock
from api_checker.contracts.probe_run import ProbeKind, RequestParameters
from api_checker.core.beacon_client import BeaconClient


class BlockProbe(Probe):
    """
    Cross-checks full signed blocks. Only the block identifier of the shared
    parameters is used.
    """

    kind = ProbeKind.BLOCK

    async def fetch(
        self, client: BeaconClient, params: RequestParameters
    ) -> SignedBeaconBlock:
        return await client.get_beacon_block(params.block_id)
