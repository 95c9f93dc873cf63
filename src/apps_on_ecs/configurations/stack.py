"""
StackConfig - configuration for a single stack module.
Maintainers: Eric Wilson
MIT License. See Project Root for license information.
"""

from typing import Any, Dict, Optional


class StackConfig:
    """
    Stack Configuration.

    Example:
        {
            "name": "apps",
            "module": "apps_on_ecs_stack",
            "enabled": true,
            "apps_on_ecs": {...}
        }
    """

    def __init__(self, stack: Dict[str, Any], workload: Optional[Dict[str, Any]] = None) -> None:
        self.__dictionary = stack or {}
        self.__workload = workload or {}

    @property
    def dictionary(self) -> Dict[str, Any]:
        """The stack configuration dictionary"""
        return self.__dictionary

    @property
    def workload(self) -> Dict[str, Any]:
        return self.__workload

    @property
    def name(self) -> str:
        """Stack name"""
        name = self.__dictionary.get("name")
        if not name:
            raise ValueError("Stack name is required. Please add a name to the stack configuration.")
        return name

    @property
    def module(self) -> str:
        """Registered stack module used to build this stack"""
        module = self.__dictionary.get("module")
        if not module:
            raise ValueError(f"Stack '{self.name}' is missing a module.")
        return module

    @property
    def enabled(self) -> bool:
        """Whether the stack should be built"""
        return str(self.__dictionary.get("enabled", True)).lower() == "true"

    @property
    def description(self) -> Optional[str]:
        return self.__dictionary.get("description")
