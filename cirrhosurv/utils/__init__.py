"""
Utility functions
"""

from .hazard_transforms import HazardTransforms

__all__ = [
    "HazardTransforms"
]
