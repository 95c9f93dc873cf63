"""
ECS Stack Library

Contains ECS-related stack modules for placing services on
existing ECS clusters.
"""

from .apps_on_ecs_stack import AppsOnEcsStack

__all__ = [
    "AppsOnEcsStack"
]
