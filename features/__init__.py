"""
Features package for the Agro Dashboard application.

This package contains the query refinement controller that drives data
fetching and automatic filter relaxation.
"""

from features.refinement_controller import RefinementController, is_degenerate, next_relaxation

__all__ = [
    'RefinementController',
    'is_degenerate',
    'next_relaxation'
]
