"""Service modules"""
from .perception import Perception
from .guardian import Guardian, IterationResult

__all__ = ["Perception", "Guardian", "IterationResult"]
