from .basic import BasicStrategyAgent
from .random_agent import RandomAgent

__all__ = ["BasicStrategyAgent", "RandomAgent"]
