"""Tests for uniform selection helpers."""

import random

import pytest

from grass_app.utils.selection import pick_uniform, uniform_index


class TestUniformIndex:
    @pytest.mark.parametrize("value,count,expected", [
        (0.0, 6, 0),
        (0.5, 6, 3),
        (0.999, 6, 5),
        (1.0, 6, 5),
        (0.3, 1, 0),
    ])
    def test_index(self, make_random, value, count, expected):
        assert uniform_index(count, make_random(value)) == expected

    @pytest.mark.parametrize("count", [0, -1])
    def test_empty_rejected(self, fixed_random, count):
        with pytest.raises(ValueError):
            uniform_index(count, fixed_random)

    def test_seeded_random_covers_every_index(self):
        rng = random.Random(7)
        seen = {uniform_index(4, rng) for _ in range(200)}
        assert seen == {0, 1, 2, 3}


class TestPickUniform:
    def test_pick(self, make_random):
        assert pick_uniform(("a", "b", "c"), make_random(0.7)) == "c"

    def test_random_module_is_a_source(self):
        assert pick_uniform(["only"], random) == "only"
