import logging
import random
import time
from typing import Optional, Tuple

from api_checker.contracts.identifiers import BlockId, StateId
from api_checker.contracts.probe_run import RequestParameters

logger = logging.getLogger(__name__)

MAX_SUBSET_SIZE = 100
VALIDATOR_INDEX_UPPER_BOUND = 500_000
DEFAULT_RECENT_SLOT_WINDOW = 64

STATE_CHOICES = ("finalized", "justified", "head", "slot")
BLOCK_CHOICES = ("finalized", "head", "slot")


class ChainClock:
    """
    Wall-clock slot calculator anchored at the chain's genesis time.
    """

    def __init__(self, genesis_time: int, seconds_per_slot: int = 12):
        self.genesis_time = genesis_time
        self.seconds_per_slot = seconds_per_slot

    def current_slot(self, now: Optional[float] = None) -> int:
        now = time.time() if now is None else now
        return max(0, int(now - self.genesis_time) // self.seconds_per_slot)


class ParameterSampler:
    """
    Produces randomized, protocol-valid request parameters biased toward
    recent chain history so nodes still hold the referenced states.
    """

    def __init__(
        self,
        clock: ChainClock,
        recent_slot_window: int = DEFAULT_RECENT_SLOT_WINDOW,
        rng: Optional[random.Random] = None,
    ):
        self.clock = clock
        self.recent_slot_window = recent_slot_window
        self.rng = rng or random.Random()

    def _recent_slot(self) -> int:
        current = self.clock.current_slot()
        low = max(0, current - self.recent_slot_window)
        if current <= low:
            return current
        return self.rng.randrange(low, current)

    def random_state_identifier(self) -> StateId:
        choice = self.rng.choice(STATE_CHOICES)
        if choice == "slot":
            return StateId.at_slot(self._recent_slot())
        return StateId.named(choice)

    def random_block_identifier(self) -> BlockId:
        choice = self.rng.choice(BLOCK_CHOICES)
        if choice == "slot":
            return BlockId.at_slot(self._recent_slot())
        return BlockId.named(choice)

    def random_validator_subset(self) -> Tuple[int, ...]:
        """
        Pick between 0 and 99 validator indices. An empty subset is a valid
        result and asks the node for every validator.

        Indices are distinct since nodes differ in how they treat repeated ids.
        """
        count = self.rng.randrange(MAX_SUBSET_SIZE)
        return tuple(
            sorted(self.rng.sample(range(VALIDATOR_INDEX_UPPER_BOUND), count))
        )

    def sample(self) -> RequestParameters:
        params = RequestParameters(
            state_id=self.random_state_identifier(),
            block_id=self.random_block_identifier(),
            indices=self.random_validator_subset(),
        )
        logger.debug(f"Sampled request parameters: {params.describe()}")
        return params
