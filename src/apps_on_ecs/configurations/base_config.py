"""
Geek Cafe, LLC
Maintainers: Eric Wilson
MIT License. See Project Root for the license information.
"""

from typing import Dict, Any


class BaseConfig:
    """
    Base configuration class that provides common functionality for all resource configurations.

    Wraps a plain dictionary (usually loaded from JSON) and gives the
    resource-specific subclasses a uniform way to read values and
    SSM parameter paths.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        """
        Initialize the base configuration with a dictionary.

        Args:
            config: Dictionary containing configuration values
        """
        self.__config = config or {}

    @property
    def dictionary(self) -> Dict[str, Any]:
        """
        Get the raw configuration dictionary.

        Returns:
            The configuration dictionary
        """
        return self.__config

    @property
    def ssm(self) -> Dict[str, Any]:
        """SSM configuration block ({"exports": {...}, "imports": {...}})"""
        return self.__config.get("ssm", {})

    @property
    def ssm_exports(self) -> Dict[str, str]:
        """
        Get the SSM parameter paths for values this resource exports.

        For example:
        {
            "web_dns_name": "/my-app/alb/web/dns-name",
            "api_service_name": "/my-app/ecs/api/service-name"
        }

        Returns:
            Dictionary mapping attribute names to SSM parameter paths for export
        """
        return self.ssm.get("exports", {})

    @property
    def ssm_imports(self) -> Dict[str, str]:
        """SSM parameter paths for values this resource consumes"""
        return self.ssm.get("imports", {})

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key.

        Args:
            key: The configuration key
            default: Default value if key is not found

        Returns:
            The configuration value or default
        """
        return self.__config.get(key, default)
