"""Tests for the continuous and discrete action parsers."""
import numpy as np
import pytest
from gymnasium import spaces

from arenagym.action_parsers import ContinuousAction, DiscreteAction
from arenagym.config import ACTION_SIZE


class TestContinuousAction:

    def test_action_space(self):
        space = ContinuousAction().get_action_space()
        assert isinstance(space, spaces.Box)
        assert space.shape == (ACTION_SIZE,)

    def test_clips_and_casts(self, sample_state):
        actions = [[2.0] * ACTION_SIZE, [-3.0] * ACTION_SIZE]
        parsed = ContinuousAction().parse_actions(actions, sample_state)
        assert parsed.dtype == np.float32
        assert parsed.shape == (2, ACTION_SIZE)
        assert parsed.max() == 1.0
        assert parsed.min() == -1.0

    def test_single_action_promoted_to_row(self, sample_state):
        parsed = ContinuousAction().parse_actions(np.zeros(ACTION_SIZE), sample_state)
        assert parsed.shape == (1, ACTION_SIZE)


class TestDiscreteAction:

    def test_action_space(self):
        space = DiscreteAction(n_bins=5).get_action_space()
        assert isinstance(space, spaces.MultiDiscrete)
        assert space.nvec.tolist() == [5, 5, 5, 5, 5, 2, 2, 2]

    def test_bins_map_to_unit_range(self, sample_state):
        actions = np.array(
            [
                [0, 1, 2, 0, 2, 1, 0, 1],
                [2, 2, 2, 2, 2, 0, 0, 0],
            ]
        )
        parsed = DiscreteAction(n_bins=3).parse_actions(actions, sample_state)
        np.testing.assert_allclose(parsed[0], [-1, 0, 1, -1, 1, 1, 0, 1])
        np.testing.assert_allclose(parsed[1], [1, 1, 1, 1, 1, 0, 0, 0])

    def test_out_of_range_values_clipped(self, sample_state):
        actions = [[4, 0, 0, 0, 0, 3, 0, 0], [1] * ACTION_SIZE]
        parsed = DiscreteAction(n_bins=3).parse_actions(actions, sample_state)

        np.testing.assert_allclose(parsed[0], [1, -1, -1, -1, -1, 1, 0, 0])
        np.testing.assert_allclose(parsed[1], [0, 0, 0, 0, 0, 1, 1, 1])
        assert parsed.max() <= 1.0
        assert parsed.min() >= -1.0
        assert parsed[:, 5:].min() >= 0.0

    def test_negative_values_clipped(self, sample_state):
        actions = [[-3, 1, 1, 1, 1, -1, 0, 2]]
        parsed = DiscreteAction(n_bins=5).parse_actions(actions, sample_state)
        assert parsed[0, 0] == -1.0
        np.testing.assert_allclose(parsed[0, 5:], [0, 0, 1])

    def test_does_not_modify_input(self, sample_state):
        actions = np.ones((2, ACTION_SIZE), dtype=np.float32)
        DiscreteAction().parse_actions(actions, sample_state)
        assert np.all(actions == 1.0)

    @pytest.mark.parametrize("n_bins", [1, 2, 4])
    def test_invalid_bins(self, n_bins):
        with pytest.raises(ValueError):
            DiscreteAction(n_bins=n_bins)
