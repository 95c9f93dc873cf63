"""
ECS Service Configuration

A service descriptor: one container behind one load balancer, with
optional task autoscaling.
"""

from typing import Any, Dict, List, Optional

from apps_on_ecs.configurations.resources.auto_scaling import TaskAutoScalingConfig
from apps_on_ecs.configurations.resources.container import ContainerConfig
from apps_on_ecs.configurations.resources.load_balancer import LoadBalancerConfig


class EcsServiceConfig:
    """
    Configuration for one ECS service on the EC2 cluster.

    Example:
        {
            "name": "web",
            "desired_count": 2,
            "placement_strategies": [{"type": "spread", "field": "attribute:ecs.availability-zone"}],
            "container": {...},
            "load_balancer": {"name": "public-web"},
            "autoscaling": {"min_capacity": 2, "max_capacity": 6, "cpu": {...}}
        }
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self._config = config or {}

    @property
    def dictionary(self) -> Dict[str, Any]:
        return self._config

    @property
    def name(self) -> str:
        """Service name, used in every construct id of the service"""
        name = self._config.get("name")
        if not name:
            raise ValueError("Every service requires a name (apps_on_ecs.services[].name)")
        return name

    @property
    def desired_count(self) -> int:
        return int(self._config.get("desired_count", 1))

    @property
    def placement_strategies(self) -> List[Dict[str, Any]]:
        """Placement strategies: spread, spread_across_instances, binpack, random"""
        return self._config.get("placement_strategies", [])

    @property
    def placement_constraints(self) -> List[Dict[str, Any]]:
        """Placement constraints: distinct_instance, member_of"""
        return self._config.get("placement_constraints", [])

    @property
    def max_healthy_percent(self) -> int:
        return int(self._config.get("max_healthy_percent", 200))

    @property
    def min_healthy_percent(self) -> int:
        return int(self._config.get("min_healthy_percent", 50))

    @property
    def container(self) -> ContainerConfig:
        return ContainerConfig(self._config.get("container", {}))

    @property
    def load_balancer(self) -> LoadBalancerConfig:
        return LoadBalancerConfig(self._config.get("load_balancer", {}), service_name=self.name)

    @property
    def autoscaling(self) -> Optional[TaskAutoScalingConfig]:
        """Task autoscaling or None"""
        autoscaling = self._config.get("autoscaling")
        if not autoscaling:
            return None
        return TaskAutoScalingConfig(autoscaling, service_name=self.name)
