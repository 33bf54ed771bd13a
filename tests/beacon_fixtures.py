from api_checker.contracts.beacon import (
    Checkpoint,
    FinalityCheckpoints,
    SignedBeaconBlock,
    Validator,
    ValidatorSummary,
)

FAR_FUTURE_EPOCH = 2**64 - 1


def make_validator_summary(index=5, balance=100, status="active_ongoing", slashed=False):
    return ValidatorSummary(
        index=index,
        balance=balance,
        status=status,
        validator=Validator(
            pubkey="0x" + "93" * 48,
            withdrawal_credentials="0x00" + "11" * 31,
            effective_balance=32_000_000_000,
            slashed=slashed,
            activation_eligibility_epoch=0,
            activation_epoch=0,
            exit_epoch=FAR_FUTURE_EPOCH,
            withdrawable_epoch=FAR_FUTURE_EPOCH,
        ),
    )


def make_checkpoints(finalized_epoch=10):
    return FinalityCheckpoints(
        previous_justified=Checkpoint(epoch=finalized_epoch, root="0xaa"),
        current_justified=Checkpoint(epoch=finalized_epoch + 1, root="0xbb"),
        finalized=Checkpoint(epoch=finalized_epoch, root="0xaa"),
    )


def make_block(slot="100", graffiti="0x00"):
    return SignedBeaconBlock(
        version="deneb",
        message={
            "slot": slot,
            "proposer_index": "7",
            "parent_root": "0x01",
            "state_root": "0x02",
            "body": {"graffiti": graffiti, "attestations": []},
        },
        signature="0xab",
    )
