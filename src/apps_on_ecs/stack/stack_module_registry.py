"""
Geek Cafe, LLC
Maintainers: Eric Wilson
MIT License. See Project Root for the license information.
"""

from typing import Callable, Dict, Type

from aws_lambda_powertools import Logger

from apps_on_ecs.interfaces.istack import IStack

logger = Logger(service="StackModuleRegistry")


class StackModuleRegistry:
    """Maps the "module" name of a stack configuration to its stack class"""

    _modules: Dict[str, Type[IStack]] = {}

    @classmethod
    def register(cls, name: str, stack_class: Type[IStack]) -> None:
        if name in cls._modules and cls._modules[name] is not stack_class:
            logger.warning(f"Stack module '{name}' is being re-registered by {stack_class.__name__}")
        cls._modules[name] = stack_class

    @classmethod
    def get(cls, name: str) -> Type[IStack]:
        stack_class = cls._modules.get(name)
        if not stack_class:
            raise ValueError(
                f"Unknown stack module '{name}'. "
                f"Registered modules: {sorted(cls._modules.keys())}"
            )
        return stack_class

    @classmethod
    def modules(cls) -> Dict[str, Type[IStack]]:
        return dict(cls._modules)


def register_stack(name: str) -> Callable[[Type[IStack]], Type[IStack]]:
    """Class decorator registering a stack module under the given name"""

    def decorator(stack_class: Type[IStack]) -> Type[IStack]:
        StackModuleRegistry.register(name, stack_class)
        return stack_class

    return decorator
