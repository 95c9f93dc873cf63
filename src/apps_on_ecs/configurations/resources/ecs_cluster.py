"""
ECS Cluster Configuration

Defines the configuration schema for the existing ECS cluster the
services are placed on, plus the optional Service Connect settings.
"""

from typing import Optional, Dict, Any, List


class EcsClusterConfig:
    """
    Configuration for an existing EC2 backed ECS cluster.

    The cluster is never created here; it is imported by name together
    with the security groups attached to its container instances.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self._config = config or {}

    @property
    def dictionary(self) -> Dict[str, Any]:
        """Access to the underlying configuration dictionary"""
        return self._config

    @property
    def name(self) -> str:
        """Name of the existing ECS cluster"""
        name = self._config.get("name")
        if not name:
            raise ValueError("ECS cluster name is required (apps_on_ecs.cluster.name)")
        return name

    @property
    def security_group_ids(self) -> List[str]:
        """Security groups attached to the cluster's container instances"""
        return self._config.get("security_group_ids", [])

    @property
    def has_ec2_capacity(self) -> bool:
        """Whether the cluster has EC2 capacity registered"""
        return self._config.get("has_ec2_capacity", True)


class ServiceConnectConfig:
    """
    ECS Service Connect settings.

    When present every service is wired into the Cloud Map namespace and
    its task definition is sized to hold the Envoy proxy next to the
    application container.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self._config = config or {}

    @property
    def dns_namespace(self) -> str:
        """Cloud Map namespace (name or ARN)"""
        namespace = self._config.get("dns_namespace")
        if not namespace:
            raise ValueError("service_connect.dns_namespace is required when service connect is configured")
        return namespace

    @property
    def proxy_cpu(self) -> int:
        """CPU units reserved for the proxy"""
        return int(self._config.get("proxy_cpu", 0))

    @property
    def proxy_memory_limit(self) -> int:
        """Memory (MiB) reserved for the proxy"""
        return int(self._config.get("proxy_memory_limit", 0))

    @property
    def default_port(self) -> int:
        """Port used when the container declares no port mappings"""
        return int(self._config.get("default_port", 80))

    @staticmethod
    def from_dict(config: Optional[Dict[str, Any]]) -> Optional["ServiceConnectConfig"]:
        """Returns None when service connect is not configured"""
        if not config:
            return None
        return ServiceConnectConfig(config)
