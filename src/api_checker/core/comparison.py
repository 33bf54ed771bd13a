"""
Type-specific equivalence rules and the all-pairs search used to detect
divergence between endpoint responses.
"""
import logging
import statistics
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from api_checker.contracts.beacon import (
    BalanceSummary,
    FinalityCheckpoints,
    SignedBeaconBlock,
    ValidatorSummary,
)
from api_checker.contracts.probe_run import Mismatch, ProbeKind, ProbeResult

logger = logging.getLogger(__name__)

Comparator = Callable[[Any, Any], bool]


def median(values: Sequence[float]) -> float:
    """
    Median of the given values, 0 for an empty sequence. Even-length input
    averages the two middle values.
    """
    return float(statistics.median(values)) if values else 0.0


def canonical_status(status) -> str:
    if isinstance(status, Enum):
        status = status.value
    return str(status).strip().lower()


def validator_summaries_equal(a: ValidatorSummary, b: ValidatorSummary) -> bool:
    if a.index != b.index:
        return False
    if a.balance != b.balance:
        return False
    if canonical_status(a.status) != canonical_status(b.status):
        return False
    return a.validator == b.validator


def balance_summaries_equal(a: BalanceSummary, b: BalanceSummary) -> bool:
    return a.index == b.index and a.balance == b.balance


def finality_checkpoints_equal(a: FinalityCheckpoints, b: FinalityCheckpoints) -> bool:
    if a.previous_justified != b.previous_justified:
        return False
    if a.current_justified != b.current_justified:
        return False
    return a.finalized == b.finalized


def blocks_equal(a: SignedBeaconBlock, b: SignedBeaconBlock) -> bool:
    if a.version != b.version:
        return False
    if a.signature.lower() != b.signature.lower():
        return False
    return a.message == b.message


def state_roots_equal(a: str, b: str) -> bool:
    return a.lower() == b.lower()


def list_equal(element_equal: Comparator) -> Comparator:
    """Lift an element comparator to lists compared position by position."""

    def compare(a: List[Any], b: List[Any]) -> bool:
        if len(a) != len(b):
            return False
        return all(element_equal(x, y) for x, y in zip(a, b))

    compare.__name__ = f"list_of_{element_equal.__name__}"
    return compare


COMPARATORS: Dict[ProbeKind, Comparator] = {
    ProbeKind.VALIDATORS: list_equal(validator_summaries_equal),
    ProbeKind.BALANCES: list_equal(balance_summaries_equal),
    ProbeKind.BLOCK: blocks_equal,
    ProbeKind.FINALITY_CHECKPOINTS: finality_checkpoints_equal,
    ProbeKind.STATE_ROOT: state_roots_equal,
}


def sort_by_index(value):
    """
    Order list payloads by ascending entity index so comparison does not
    depend on server-side ordering. Other payloads pass through unchanged.
    """
    if isinstance(value, list):
        return sorted(value, key=lambda item: item.index)
    return value


def find_first_mismatch(
    successes: Sequence[ProbeResult], comparator: Comparator
) -> Optional[Mismatch]:
    """
    Compare every unordered pair (i < j) of successful results and return the
    first pair that differs, or None when all are equal.
    """
    for i in range(len(successes)):
        for j in range(i + 1, len(successes)):
            first, second = successes[i], successes[j]
            if not comparator(first.value, second.value):
                logger.debug(
                    f"Mismatch between {first.endpoint} and {second.endpoint} "
                    f"using {comparator.__name__}"
                )
                return Mismatch(
                    first_endpoint=first.endpoint,
                    second_endpoint=second.endpoint,
                    first_value=first.value,
                    second_value=second.value,
                )
    return None
