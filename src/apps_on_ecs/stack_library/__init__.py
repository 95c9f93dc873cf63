"""
Stack Library

Importing this package registers every stack module with the
StackModuleRegistry.
"""

from .ecs import AppsOnEcsStack

__all__ = ["AppsOnEcsStack"]
