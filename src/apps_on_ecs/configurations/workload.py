"""
WorkloadConfig - the top level workload document.
Maintainers: Eric Wilson
MIT License. See Project Root for license information.
"""

from typing import Any, Dict, List, Optional


class WorkloadConfig:
    """
    Workload Configuration.

    Accepts either a document wrapped in a "workload" key or a flat one:
        {"workload": {"name": "shop", "devops": {...}, "stacks": [...]}}
        {"name": "shop", "devops": {...}, "stacks": [...]}
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self.__dictionary = config or {}
        self.__config = self.__dictionary.get("workload", self.__dictionary)

    @property
    def dictionary(self) -> Dict[str, Any]:
        """The full workload document"""
        return self.__dictionary

    @property
    def name(self) -> str:
        """Workload name"""
        name = self.__config.get("name")
        if not name:
            raise ValueError("Workload name is required. Please add workload.name to the configuration.")
        return name

    @property
    def description(self) -> Optional[str]:
        return self.__config.get("description")

    @property
    def devops(self) -> Dict[str, Any]:
        """DevOps settings (account, region)"""
        return self.__config.get("devops", {})

    @property
    def vpc(self) -> Dict[str, Any]:
        """Workload level VPC settings"""
        return self.__config.get("vpc", self.__dictionary.get("vpc", {}))

    @property
    def vpc_id(self) -> Optional[str]:
        """VPC id shared by every stack of the workload"""
        return self.__config.get("vpc_id") or self.vpc.get("id")

    @property
    def vpc_name(self) -> Optional[str]:
        """VPC name (Name tag) shared by every stack of the workload"""
        return self.__config.get("vpc_name") or self.vpc.get("name")

    @property
    def deployments(self) -> List[Dict[str, Any]]:
        return self.__config.get("deployments", [])

    @property
    def stacks(self) -> List[Dict[str, Any]]:
        """Stack configuration dictionaries"""
        return self.__config.get("stacks", [])
