"""Tests for the shuffler."""

from collections import Counter
from random import Random, SystemRandom
from unittest.mock import MagicMock

from engine.cards import build_deck
from engine.shuffle import Shuffler


class TestShuffle:
    """Tests for Fisher-Yates shuffling."""

    def test_shuffle_is_permutation(self, shuffler):
        deck = build_deck()
        shuffled = shuffler.shuffle(deck)
        assert len(shuffled) == 77
        assert set(shuffled) == set(deck)
        assert shuffled != deck

    def test_shuffle_does_not_mutate_input(self, shuffler):
        items = [1, 2, 3, 4, 5]
        shuffler.shuffle(items)
        assert items == [1, 2, 3, 4, 5]

    def test_seeded_shuffle_is_reproducible(self):
        a = Shuffler(Random(7)).shuffle(build_deck())
        b = Shuffler(Random(7)).shuffle(build_deck())
        assert a == b

    def test_fresh_index_per_swap(self):
        """Each position draws its own swap index from the source."""
        rng = MagicMock()
        rng.randrange.return_value = 0
        Shuffler(rng).shuffle(range(5))
        bounds = [call.args[0] for call in rng.randrange.call_args_list]
        assert bounds == [5, 4, 3, 2]

    def test_shuffle_is_uniform(self):
        """All 6 orders of 3 items come up about equally often."""
        shuffler = Shuffler(Random(0))
        counts = Counter(shuffler.shuffle("abc") for _ in range(6000))
        assert len(counts) == 6
        assert all(800 < n < 1200 for n in counts.values())

    def test_short_inputs(self, shuffler):
        assert shuffler.shuffle([]) == ()
        assert shuffler.shuffle(["x"]) == ("x",)

    def test_default_source_is_system_random(self):
        assert isinstance(Shuffler()._rng, SystemRandom)


class TestSeed:
    """Tests for the display seed."""

    def test_seed_is_32_bit(self, shuffler):
        for _ in range(100):
            seed = shuffler.new_seed()
            assert 1 <= seed < 2**32

    def test_zero_seed_maps_to_one(self):
        rng = MagicMock()
        rng.getrandbits.return_value = 0
        assert Shuffler(rng).new_seed() == 1
        rng.getrandbits.assert_called_once_with(32)
