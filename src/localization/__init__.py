"""
Localization Module

Estimation routines used alongside the planner:
- GridLocalizer: histogram filter on a labelled toroidal grid
- GaussianBelief: Kalman predict/update on linear-Gaussian beliefs
- resample: particle filter resampling

Usage:
    from localization import GridLocalizer, Direction, MotionSpec, SenseSpec

    localizer = GridLocalizer(world_map)
    localizer.sense('white', SenseSpec(p_inaccurate=0.2))
    localizer.move(Direction.RIGHT, MotionSpec(p_move_fail=0.1))
"""

from .grid_localizer import (
    GridLocalizer,
    Direction,
    MotionSpec,
    SenseSpec,
    move_update,
    sense_update
)

from .kalman import (
    GaussianBelief,
    DegenerateCovarianceError
)

from .particle import (
    resample,
    systematic_resample,
    effective_sample_size
)

__all__ = [
    # Main interfaces
    'GridLocalizer',
    'GaussianBelief',
    'resample',

    # Configuration
    'MotionSpec',
    'SenseSpec',
    'Direction',

    # Errors
    'DegenerateCovarianceError',

    # Advanced
    'move_update',
    'sense_update',
    'systematic_resample',
    'effective_sample_size',
]
