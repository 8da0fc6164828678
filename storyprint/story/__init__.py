"""
Story input records consumed by the print engine.
"""

from .model import ALIGNMENTS, HeroImage, Story

__all__ = ["ALIGNMENTS", "HeroImage", "Story"]
