import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import TypeAdapter, ValidationError

from api_checker.contracts.beacon import (
    BalanceSummary,
    FinalityCheckpoints,
    SignedBeaconBlock,
    ValidatorStatus,
    ValidatorSummary,
)
from api_checker.contracts.identifiers import BlockId, StateId
from api_checker.core.errors import DecodeError, TransportError

logger = logging.getLogger(__name__)

_VALIDATORS = TypeAdapter(List[ValidatorSummary])
_BALANCES = TypeAdapter(List[BalanceSummary])


def _join_param(values: Sequence[Any]) -> Optional[str]:
    # An empty filter must be omitted entirely: the API reads it as "return all".
    if not values:
        return None
    return ",".join(str(v) for v in values)


class BeaconClient:
    """
    Typed client for the subset of the beacon node REST API that the probes
    cross-check. All methods raise TransportError or DecodeError on failure.
    """

    def __init__(
        self, base_url: str, client: httpx.AsyncClient, timeout: float = 10.0
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.timeout = timeout

    def __repr__(self):
        return f"BeaconClient(base_url={self.base_url})"

    async def _get_data(self, path: str, params: Optional[Dict[str, str]] = None):
        """
        GET ``path`` and return the decoded JSON envelope, which must carry ``data``.
        """
        url = f"{self.base_url}{path}"
        query = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            resp = await self.client.get(
                url,
                params=query,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise TransportError(self.base_url, f"timeout requesting {path}: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(self.base_url, f"error requesting {path}: {e}") from e

        if resp.status_code != 200:
            raise TransportError(
                self.base_url, f"GET {path}: {resp.text[:200]}", resp.status_code
            )
        try:
            body = resp.json()
        except ValueError as e:
            raise DecodeError(self.base_url, f"GET {path}: invalid JSON: {e}") from e
        if not isinstance(body, dict) or "data" not in body:
            raise DecodeError(self.base_url, f"GET {path}: missing 'data' envelope")
        logger.debug(f"GET {url} -> {resp.status_code}")
        return body

    def _decode(self, path: str, decoder, payload):
        try:
            return decoder(payload)
        except ValidationError as e:
            raise DecodeError(self.base_url, f"GET {path}: {e}") from e

    async def get_validators(
        self,
        state_id: StateId,
        indices: Sequence[int] = (),
        status_filters: Sequence[ValidatorStatus] = (),
    ) -> List[ValidatorSummary]:
        path = f"/eth/v1/beacon/states/{state_id}/validators"
        body = await self._get_data(
            path, {"id": _join_param(indices), "status": _join_param(status_filters)}
        )
        return self._decode(path, _VALIDATORS.validate_python, body["data"])

    async def get_balances(
        self, state_id: StateId, indices: Sequence[int] = ()
    ) -> List[BalanceSummary]:
        path = f"/eth/v1/beacon/states/{state_id}/validator_balances"
        body = await self._get_data(path, {"id": _join_param(indices)})
        return self._decode(path, _BALANCES.validate_python, body["data"])

    async def get_beacon_block(self, block_id: BlockId) -> SignedBeaconBlock:
        path = f"/eth/v2/beacon/blocks/{block_id}"
        body = await self._get_data(path)
        data = body["data"]
        if isinstance(data, dict):
            data = {**data, "version": body.get("version") or ""}
        return self._decode(path, SignedBeaconBlock.model_validate, data)

    async def get_finality_checkpoints(self, state_id: StateId) -> FinalityCheckpoints:
        path = f"/eth/v1/beacon/states/{state_id}/finality_checkpoints"
        body = await self._get_data(path)
        return self._decode(path, FinalityCheckpoints.model_validate, body["data"])

    async def get_state_root(self, state_id: StateId) -> str:
        path = f"/eth/v1/beacon/states/{state_id}/root"
        body = await self._get_data(path)
        data = body["data"]
        root = data.get("root") if isinstance(data, dict) else None
        if not isinstance(root, str):
            raise DecodeError(self.base_url, f"GET {path}: missing state root")
        return root
