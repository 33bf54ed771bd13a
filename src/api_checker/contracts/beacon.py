from enum import Enum
from typing import Any, Dict, Union

from pydantic import BaseModel


class ValidatorStatus(str, Enum):
    """
    Validator lifecycle statuses reported by the beacon REST API.
    """

    PENDING_INITIALIZED = "pending_initialized"
    PENDING_QUEUED = "pending_queued"
    ACTIVE_ONGOING = "active_ongoing"
    ACTIVE_EXITING = "active_exiting"
    ACTIVE_SLASHED = "active_slashed"
    EXITED_UNSLASHED = "exited_unslashed"
    EXITED_SLASHED = "exited_slashed"
    WITHDRAWAL_POSSIBLE = "withdrawal_possible"
    WITHDRAWAL_DONE = "withdrawal_done"
    ACTIVE = "active"
    PENDING = "pending"

    def __str__(self):
        return self.value


class Validator(BaseModel):
    """
    Validator record as stored in the beacon state.
    """

    pubkey: str
    withdrawal_credentials: str
    effective_balance: int
    slashed: bool
    activation_eligibility_epoch: int
    activation_epoch: int
    exit_epoch: int
    withdrawable_epoch: int


class ValidatorSummary(BaseModel):
    index: int
    balance: int
    # Nodes disagree on status encodings, so raw strings are kept as-is.
    status: Union[ValidatorStatus, str]
    validator: Validator


class BalanceSummary(BaseModel):
    index: int
    balance: int


class Checkpoint(BaseModel):
    epoch: int
    root: str


class FinalityCheckpoints(BaseModel):
    previous_justified: Checkpoint
    current_justified: Checkpoint
    finalized: Checkpoint


class SignedBeaconBlock(BaseModel):
    """
    Signed block envelope. The block message is kept as decoded JSON since its
    shape depends on the fork ``version``.
    """

    version: str = ""
    message: Dict[str, Any]
    signature: str
