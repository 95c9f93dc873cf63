"""
AppsOnEcsConfig - the "apps_on_ecs" section of a stack configuration.
Maintainers: Eric Wilson
MIT License. See Project Root for license information.
"""

from typing import Any, Dict, List, Optional

from apps_on_ecs.configurations.base_config import BaseConfig
from apps_on_ecs.configurations.resources.auto_scaling import AsgConfig
from apps_on_ecs.configurations.resources.ecs_cluster import (
    EcsClusterConfig,
    ServiceConnectConfig,
)
from apps_on_ecs.configurations.resources.ecs_service import EcsServiceConfig


class AppsOnEcsConfig(BaseConfig):
    """
    Apps on ECS Configuration.

    Example:
        {
            "vpc_name": "dev-vpc",
            "cluster": {"name": "dev-cluster", "security_group_ids": ["sg-0123"]},
            "service_connect": {"dns_namespace": "dev.local", "proxy_cpu": 256, "proxy_memory_limit": 128},
            "asg": {"instance_type": "t3.medium", "desired_capacity": 2},
            "services": [...],
            "ssm": {"exports": {"public-web_dns_name": "/dev/shop/alb/public-web/dns-name"}}
        }
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        super().__init__(config or {})

    @property
    def name(self) -> str:
        return self.get("name", "apps-on-ecs")

    @property
    def vpc_id(self) -> Optional[str]:
        return self.get("vpc_id")

    @property
    def vpc_name(self) -> Optional[str]:
        """VPC Name tag used for the lookup"""
        return self.get("vpc_name")

    @property
    def cluster(self) -> EcsClusterConfig:
        return EcsClusterConfig(self.get("cluster", {}))

    @property
    def service_connect(self) -> Optional[ServiceConnectConfig]:
        """Service Connect settings or None"""
        return ServiceConnectConfig.from_dict(self.get("service_connect"))

    @property
    def asg(self) -> AsgConfig:
        return AsgConfig(self.get("asg", {}))

    @property
    def services(self) -> List[EcsServiceConfig]:
        """Service descriptors, in build order"""
        return [EcsServiceConfig(s) for s in self.get("services", [])]

    @property
    def log_retention_days(self) -> int:
        """Retention of the shared log group"""
        return int(self.get("log_retention_days", 7))
