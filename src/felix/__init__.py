"""Felix: gait compiler and frame scheduler for an eight-servo quadruped."""

__version__ = "0.3.0"
