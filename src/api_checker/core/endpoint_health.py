import logging
from typing import Dict, List, Sequence, Set

logger = logging.getLogger(__name__)


class EndpointHealthTracker:
    """
    Benches endpoints that keep failing so they sit out a number of pipeline
    runs. A threshold of 0 disables benching entirely.
    """

    def __init__(self, failure_threshold: int = 0, cooldown_runs: int = 5):
        self.failure_threshold = failure_threshold
        self.cooldown_runs = cooldown_runs
        self._consecutive_failures: Dict[str, int] = {}  # endpoint -> failure count
        self._benched: Dict[str, int] = {}  # endpoint -> runs left on the bench
        self._sitting_out: Set[str] = set()

    @property
    def enabled(self) -> bool:
        return self.failure_threshold > 0

    def is_benched(self, endpoint: str) -> bool:
        return self._benched.get(endpoint, 0) > 0

    def select(self, endpoints: Sequence[str]) -> List[str]:
        """Return the endpoints allowed to take part in the current run."""
        return [e for e in endpoints if not self.is_benched(e)]

    def record_success(self, endpoint: str):
        self._consecutive_failures.pop(endpoint, None)

    def record_failure(self, endpoint: str):
        if not self.enabled:
            return
        self._consecutive_failures[endpoint] = (
            self._consecutive_failures.get(endpoint, 0) + 1
        )
        failure_count = self._consecutive_failures[endpoint]
        if failure_count >= self.failure_threshold:
            self._benched[endpoint] = self.cooldown_runs
            self._consecutive_failures.pop(endpoint, None)
            logger.warning(
                f"Endpoint {endpoint} benched for {self.cooldown_runs} runs after "
                f"{failure_count} consecutive failures"
            )

    def start_run(self):
        self._sitting_out = set(self._benched)

    def end_run(self):
        """Count the finished run against endpoints that sat it out."""
        for endpoint in self._sitting_out:
            self._benched[endpoint] -= 1
            if self._benched[endpoint] <= 0:
                del self._benched[endpoint]
                logger.info(f"Endpoint {endpoint} reinstated after cooldown")
