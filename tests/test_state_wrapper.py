"""Tests for the editable reset state."""
import numpy as np

from arenagym.gamestates import BLUE_TEAM, ORANGE_TEAM, GameState, PhysicsObject, PlayerData
from arenagym.state_wrapper import BALL_RADIUS, BLUE_ID_START, ORANGE_ID_START, StateWrapper


class TestForTeams:

    def test_layout_blue_first(self):
        wrapper = StateWrapper.for_teams(2, 2)
        assert [car.team_num for car in wrapper.cars] == [BLUE_TEAM, BLUE_TEAM, ORANGE_TEAM, ORANGE_TEAM]
        assert [car.car_id for car in wrapper.cars] == [
            BLUE_ID_START,
            BLUE_ID_START + 1,
            ORANGE_ID_START,
            ORANGE_ID_START + 1,
        ]
        assert wrapper.blue_count == 2
        assert wrapper.orange_count == 2

    def test_no_opponents(self):
        wrapper = StateWrapper.for_teams(3, 0)
        assert len(wrapper.blue_cars()) == 3
        assert wrapper.orange_cars() == []

    def test_ball_rests_on_floor(self):
        wrapper = StateWrapper.for_teams(1, 1)
        np.testing.assert_allclose(wrapper.ball.position, [0.0, 0.0, BALL_RADIUS])


class TestSetters:

    def test_none_leaves_component(self):
        car = StateWrapper.for_teams(1, 0).cars[0]
        car.set_pos(1.0, 2.0, 3.0)
        car.set_pos(z=10.0)
        np.testing.assert_allclose(car.position, [1.0, 2.0, 10.0])

    def test_rotation_order(self):
        car = StateWrapper.for_teams(1, 0).cars[0]
        car.set_rot(pitch=0.1, yaw=0.2, roll=0.3)
        np.testing.assert_allclose(car.rotation, [0.1, 0.2, 0.3], rtol=1e-6)


class TestFromState:

    def test_mirrors_and_sorts_by_team(self):
        state = GameState(
            players=[
                PlayerData(car_id=5, team_num=ORANGE_TEAM, boost_amount=0.5),
                PlayerData(
                    car_id=1,
                    team_num=BLUE_TEAM,
                    car_data=PhysicsObject(position=np.array([1.0, 2.0, 3.0], dtype=np.float32)),
                ),
            ],
        )
        wrapper = StateWrapper.from_state(state)

        assert [car.car_id for car in wrapper.cars] == [1, 5]
        assert wrapper.blue_count == 1
        assert wrapper.orange_count == 1
        np.testing.assert_allclose(wrapper.cars[0].position, [1.0, 2.0, 3.0])
        assert wrapper.cars[1].boost == 0.5

    def test_copies_arrays(self, sample_state):
        wrapper = StateWrapper.from_state(sample_state)
        wrapper.cars[0].set_pos(100.0, 100.0, 100.0)
        wrapper.ball.set_pos(1.0, 1.0, 1.0)

        np.testing.assert_allclose(sample_state.players[0].car_data.position, [0.0, 0.0, 0.0])
        np.testing.assert_allclose(sample_state.ball.position, [0.0, 0.0, 0.0])
