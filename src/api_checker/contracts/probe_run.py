from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from api_checker.contracts.identifiers import BlockId, StateId


class ProbeKind(str, Enum):
    """
    The fixed set of API calls cross-checked between endpoints.
    """

    VALIDATORS = "validators"
    BALANCES = "balances"
    BLOCK = "block"
    FINALITY_CHECKPOINTS = "finality_checkpoints"
    STATE_ROOT = "state_root"

    def __str__(self):
        return self.value


class RequestParameters(BaseModel):
    """
    Randomized input shared by every endpoint within one probe invocation.

    An empty ``indices`` tuple means "no filter", not "match nothing".
    """

    model_config = ConfigDict(frozen=True)

    state_id: StateId
    block_id: BlockId
    indices: Tuple[int, ...] = ()

    def describe(self) -> str:
        indices = list(self.indices) if self.indices else "all"
        return f"state_id={self.state_id} block_id={self.block_id} indices={indices}"


class ProbeResult(BaseModel):
    """
    Outcome of one endpoint call. Latency is only recorded on success.
    """

    endpoint: str
    value: Any = None
    latency_ms: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, endpoint: str, value: Any, latency_ms: float):
        return cls(endpoint=endpoint, value=value, latency_ms=latency_ms)

    @classmethod
    def failure(cls, endpoint: str, error: str):
        return cls(endpoint=endpoint, error=error)


class Mismatch(BaseModel):
    first_endpoint: str
    second_endpoint: str
    first_value: Any = None
    second_value: Any = None


class ProbeRun(BaseModel):
    kind: ProbeKind
    params: RequestParameters
    results: List[ProbeResult] = Field(default_factory=list)
    median_latency_ms: float = 0.0
    mismatch: Optional[Mismatch] = None

    @property
    def successes(self) -> List[ProbeResult]:
        return [r for r in self.results if r.ok]

    @property
    def failures(self) -> List[ProbeResult]:
        return [r for r in self.results if not r.ok]

    @property
    def diverged(self) -> bool:
        return self.mismatch is not None
