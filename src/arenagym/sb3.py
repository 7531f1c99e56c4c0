"""
stable-baselines3 adapter for ArenaGym.

SB3 algorithms expect a VecEnv: a batch of independent single-agent
environments with automatic resets. SB3SingleInstanceEnv presents one
ArenaEnv that way by treating every agent of the match as one
sub-environment, so a single shared policy controls all cars.

Architecture Role:
    PPO("MlpPolicy", SB3SingleInstanceEnv(env)) → step_async/step_wait
    → ArenaEnv.step() → GameMatch → simulator

Auto-Reset:
    ArenaEnv never resets on its own; VecEnv semantics require it. When a
    step ends the episode (terminal or truncated) the adapter resets the
    underlying environment, returns the first observations of the new
    episode, and stores the last ones under "terminal_observation" in each
    agent's info dict, as SB3's own VecEnvs do.

Notes:
    - num_envs is fixed to the agent count at construction time. Changing
      the team size through update_settings() needs a new adapter.

Dependencies:
    - stable_baselines3: VecEnv base class
    - numpy: Batched observations, rewards and dones
"""

from collections.abc import Sequence
from typing import Any

import numpy as np
from stable_baselines3.common.vec_env import VecEnv

from arenagym.env import ArenaEnv


class SB3SingleInstanceEnv(VecEnv):
    """
    Expose one multi-agent ArenaEnv as an SB3 VecEnv (one sub-env per agent).

    Attributes:
        env (ArenaEnv): The wrapped environment.
    """

    def __init__(self, env: ArenaEnv):
        # VecEnv.__init__ queries attributes through get_attr(), so the
        # wrapped env has to be in place first
        self.env = env
        self._actions: np.ndarray | None = None
        self._next_seed: int | None = None
        super().__init__(env.agent_count, env.observation_space, env.action_space)

    def reset(self) -> np.ndarray:
        obs = self.env.reset(seed=self._next_seed)
        self._next_seed = None
        self.reset_infos = [{} for _ in range(self.num_envs)]
        return np.asarray(obs)

    def step_async(self, actions: np.ndarray) -> None:
        self._actions = actions

    def step_wait(self):
        obs, rewards, done, info = self.env.step(self._actions)
        truncated = bool(info.get("truncated", False))
        finished = bool(done) or truncated

        obs = np.asarray(obs)
        infos = [dict(info) for _ in range(self.num_envs)]
        if finished:
            for i, agent_info in enumerate(infos):
                agent_info["terminal_observation"] = obs[i]
                agent_info["TimeLimit.truncated"] = truncated and not done
            obs = np.asarray(self.env.reset())

        return (
            obs,
            np.asarray(rewards, dtype=np.float32),
            np.full(self.num_envs, finished, dtype=bool),
            infos,
        )

    def seed(self, seed: int | None = None) -> Sequence[int | None]:
        """Seed the next reset. All agents share one match, hence one seed."""
        self._next_seed = seed
        return [seed] * self.num_envs

    def close(self) -> None:
        self.env.close()

    def get_attr(self, attr_name: str, indices=None) -> list[Any]:
        value = getattr(self.env, attr_name)
        return [value for _ in self._get_indices(indices)]

    def set_attr(self, attr_name: str, value: Any, indices=None) -> None:
        setattr(self.env, attr_name, value)

    def env_method(self, method_name: str, *method_args, indices=None, **method_kwargs) -> list[Any]:
        # Every index refers to the same match, so the method runs once
        result = getattr(self.env, method_name)(*method_args, **method_kwargs)
        return [result for _ in self._get_indices(indices)]

    def env_is_wrapped(self, wrapper_class, indices=None) -> list[bool]:
        return [False for _ in self._get_indices(indices)]
