from .base import BufferedGenerator, CloudletGenerator
from .sequence import IterableGenerator, SequenceGenerator
from .stochastic import StochasticGenerator

__all__ = [
    "BufferedGenerator",
    "CloudletGenerator",
    "IterableGenerator",
    "SequenceGenerator",
    "StochasticGenerator",
]
