"""
DeploymentConfig - one deployment (environment) of a workload.
Maintainers: Eric Wilson
MIT License. See Project Root for license information.
"""

from typing import Any, Dict, Optional


class DeploymentConfig:
    """
    Deployment Configuration.
    Combines the workload document with a single deployment entry, e.g.
        {"name": "dev", "environment": "dev", "account": "123456789012", "region": "us-east-1"}
    """

    def __init__(self, workload: Dict[str, Any], deployment: Dict[str, Any]) -> None:
        self.__workload = (workload or {}).get("workload", workload or {})
        self.__deployment = deployment or {}

    @property
    def dictionary(self) -> Dict[str, Any]:
        return self.__deployment

    @property
    def name(self) -> str:
        """Deployment name"""
        return self.__deployment.get("name", "deployment")

    @property
    def environment(self) -> str:
        """Environment name (dev, uat, prod, ...)"""
        environment = self.__deployment.get("environment")
        if not environment:
            raise ValueError(
                f"Deployment '{self.name}' is missing an environment. "
                "Please add an environment to the deployment."
            )
        return environment

    @property
    def workload_name(self) -> str:
        """Name of the workload this deployment belongs to"""
        return self.__deployment.get("workload_name") or self.__workload.get("name", "workload")

    @property
    def account(self) -> Optional[str]:
        """AWS account, falls back to the workload devops account"""
        return self.__deployment.get("account") or self.__workload.get("devops", {}).get("account")

    @property
    def region(self) -> Optional[str]:
        """AWS region, falls back to the workload devops region"""
        return self.__deployment.get("region") or self.__workload.get("devops", {}).get("region")

    @property
    def enabled(self) -> bool:
        return str(self.__deployment.get("enabled", True)).lower() == "true"

    @property
    def tags(self) -> Dict[str, str]:
        """Tags applied to every stack of the deployment"""
        tags = {"Workload": self.workload_name, "Environment": self.environment}
        tags.update(self.__deployment.get("tags", {}))
        return tags

    def build_resource_name(self, name: str) -> str:
        """
        Build a deployment scoped resource name.

        Example:
            build_resource_name("apps") -> "shop-dev-apps"
        """
        return f"{self.workload_name}-{self.environment}-{name}".lower()
