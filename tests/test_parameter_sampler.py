import random
import unittest

from api_checker.core.parameter_sampler import (
    MAX_SUBSET_SIZE,
    VALIDATOR_INDEX_UPPER_BOUND,
    ChainClock,
    ParameterSampler,
)

GENESIS = 1_606_824_023


class FixedClock(ChainClock):
    def __init__(self, slot):
        super().__init__(genesis_time=0)
        self.slot = slot

    def current_slot(self, now=None):
        return self.slot


class TestChainClock(unittest.TestCase):
    def test_current_slot_from_genesis(self):
        clock = ChainClock(GENESIS, seconds_per_slot=12)
        self.assertEqual(clock.current_slot(now=GENESIS), 0)
        self.assertEqual(clock.current_slot(now=GENESIS + 12 * 100 + 5), 100)

    def test_before_genesis_clamps_to_zero(self):
        clock = ChainClock(GENESIS)
        self.assertEqual(clock.current_slot(now=GENESIS - 1000), 0)


class TestParameterSampler(unittest.TestCase):
    def setUp(self):
        self.sampler = ParameterSampler(
            FixedClock(10_000), recent_slot_window=64, rng=random.Random(1234)
        )

    def test_state_identifier_kinds_and_slot_window(self):
        kinds = set()
        for _ in range(500):
            state_id = self.sampler.random_state_identifier()
            kinds.add(state_id.kind)
            if state_id.kind == "slot":
                self.assertGreaterEqual(state_id.slot, 10_000 - 64)
                self.assertLess(state_id.slot, 10_000)
        self.assertEqual(kinds, {"finalized", "justified", "head", "slot"})

    def test_block_identifier_never_justified(self):
        kinds = {self.sampler.random_block_identifier().kind for _ in range(300)}
        self.assertEqual(kinds, {"finalized", "head", "slot"})

    def test_validator_subset_bounds(self):
        sizes = set()
        for _ in range(300):
            subset = self.sampler.random_validator_subset()
            sizes.add(len(subset))
            self.assertLess(len(subset), MAX_SUBSET_SIZE)
            self.assertEqual(len(set(subset)), len(subset))
            for index in subset:
                self.assertGreaterEqual(index, 0)
                self.assertLess(index, VALIDATOR_INDEX_UPPER_BOUND)
        self.assertGreater(len(sizes), 10)

    def test_empty_subset_is_a_valid_output(self):
        rng = random.Random()
        rng.randrange = lambda *args: 0
        sampler = ParameterSampler(FixedClock(100), rng=rng)
        params = sampler.sample()
        self.assertEqual(params.indices, ())
        self.assertIn("indices=all", params.describe())

    def test_young_chain_uses_available_history(self):
        sampler = ParameterSampler(FixedClock(3), rng=random.Random(7))
        for _ in range(100):
            self.assertIn(sampler._recent_slot(), (0, 1, 2))
        genesis_sampler = ParameterSampler(FixedClock(0), rng=random.Random(7))
        self.assertEqual(genesis_sampler._recent_slot(), 0)

    def test_sample_builds_frozen_parameters(self):
        params = self.sampler.sample()
        with self.assertRaises(Exception):
            params.indices = (1,)


if __name__ == "__main__":
    unittest.main()
