"""
AsgConfig - EC2 Auto Scaling Group sizing for the cluster capacity.
Maintainers: Eric Wilson
MIT License. See Project Root for license information.
"""

from typing import Any, Dict, Optional


class AsgConfig:
    """
    Auto Scaling Group Configuration.
    Each property reads from the config dict and provides a sensible default if not set.
    """

    def __init__(self, config: dict = None) -> None:
        self.__config = config or {}

    @property
    def dictionary(self) -> Dict[str, Any]:
        return self.__config

    @property
    def instance_type(self) -> str:
        """EC2 instance type"""
        return self.__config.get("instance_type", "t3.medium")

    @property
    def machine_image(self) -> str:
        """Machine image type (amazon-linux-2023, amazon-linux-2, ...)"""
        return self.__config.get("machine_image", "amazon-linux-2023")

    @property
    def desired_capacity(self) -> int:
        """Desired instance count"""
        return int(self.__config.get("desired_capacity", 1))

    @property
    def min_capacity(self) -> int:
        """Minimum instance count, defaults to the desired count"""
        return int(self.__config.get("min_capacity", self.desired_capacity))

    @property
    def max_capacity(self) -> int:
        """Maximum instance count, defaults to the desired count"""
        return int(self.__config.get("max_capacity", self.desired_capacity))

    @property
    def cooldown(self) -> int:
        """Cooldown in seconds"""
        return int(self.__config.get("cooldown", 300))

    def validate(self) -> None:
        if not self.min_capacity <= self.desired_capacity <= self.max_capacity:
            raise ValueError(
                "Invalid ASG sizing: expected min_capacity <= desired_capacity <= max_capacity, "
                f"got {self.min_capacity} / {self.desired_capacity} / {self.max_capacity}"
            )


class TaskAutoScalingConfig:
    """
    ECS service task autoscaling.

    Exactly one trigger is applied. CPU utilization wins when both
    "cpu" and "request_count" are configured.

    Example:
        {
            "min_capacity": 1,
            "max_capacity": 4,
            "cpu": {"target_utilization_percent": 60, "scale_in_cooldown": 60}
        }
    """

    CPU = "cpu"
    REQUEST_COUNT = "request_count"

    def __init__(self, config: Dict[str, Any], service_name: str = "service") -> None:
        self.__config = config or {}
        self.__service_name = service_name
        if self.min_capacity > self.max_capacity:
            raise ValueError(
                f"Service '{service_name}': autoscaling min_capacity ({self.min_capacity}) "
                f"is greater than max_capacity ({self.max_capacity})"
            )

    @property
    def min_capacity(self) -> int:
        return int(self.__config.get("min_capacity", 1))

    @property
    def max_capacity(self) -> int:
        return int(self.__config.get("max_capacity", self.min_capacity))

    @property
    def cpu(self) -> Optional[Dict[str, Any]]:
        """CPU utilization trigger settings"""
        return self.__config.get("cpu")

    @property
    def request_count(self) -> Optional[Dict[str, Any]]:
        """Request count per target trigger settings"""
        return self.__config.get("request_count")

    @property
    def trigger(self) -> Optional[str]:
        """The single trigger that will be applied"""
        if self.cpu:
            return self.CPU
        if self.request_count:
            return self.REQUEST_COUNT
        return None

    @property
    def target_utilization_percent(self) -> int:
        return int((self.cpu or {}).get("target_utilization_percent", 70))

    @property
    def requests_per_target(self) -> int:
        requests = (self.request_count or {}).get("requests_per_target")
        if not requests:
            raise ValueError(
                f"Service '{self.__service_name}': request_count.requests_per_target is required"
            )
        return int(requests)

    def cooldowns(self) -> Dict[str, Optional[int]]:
        """Scale in/out cooldowns (seconds) of the active trigger"""
        settings = (self.cpu if self.trigger == self.CPU else self.request_count) or {}
        return {
            "scale_in_cooldown": settings.get("scale_in_cooldown"),
            "scale_out_cooldown": settings.get("scale_out_cooldown"),
        }
