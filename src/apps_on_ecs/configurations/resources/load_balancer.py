"""
LoadBalancerConfig - Application Load Balancer reference of a service.
Maintainers: Eric Wilson
MIT License. See Project Root for license information.
"""

from typing import Any, Dict, List, Optional


class LoadBalancerConfig:
    """
    Load Balancer Configuration.

    The name is the reuse key: services that share a name share one
    load balancer and listener, each adding its own target group.

    Example:
        {
            "name": "public-web",
            "listener": {"open": true, "protocol": "HTTP"},
            "target": {
                "priority": 10,
                "path_patterns": ["/api/*"],
                "health_check": {"path": "/health", "interval": 30}
            }
        }
    """

    def __init__(self, config: Dict[str, Any], service_name: str = "service") -> None:
        self.__config = config or {}
        self.__service_name = service_name

    @property
    def dictionary(self) -> Dict[str, Any]:
        return self.__config

    @property
    def name(self) -> str:
        """Load balancer name (construct id and reuse key)"""
        name = self.__config.get("name")
        if not name:
            raise ValueError(f"Service '{self.__service_name}' is missing load_balancer.name")
        return name

    @property
    def listener(self) -> Dict[str, Any]:
        """Listener settings, the port is always 80"""
        return self.__config.get("listener", {})

    @property
    def listener_open(self) -> bool:
        """Allow connections from anywhere"""
        return self.listener.get("open", True)

    @property
    def listener_protocol(self) -> str:
        """Listener protocol, only HTTP on port 80 is supported"""
        protocol = str(self.listener.get("protocol", "HTTP")).upper()
        if protocol != "HTTP":
            raise ValueError(
                f"Service '{self.__service_name}' uses listener protocol '{protocol}' on "
                f"load balancer '{self.__config.get('name')}'. Only HTTP is supported."
            )
        return protocol

    @property
    def target(self) -> Dict[str, Any]:
        """Target group settings"""
        return self.__config.get("target", {})

    @property
    def priority(self) -> Optional[int]:
        """Listener rule priority, required when conditions are used"""
        return self.target.get("priority")

    @property
    def path_patterns(self) -> List[str]:
        return self.target.get("path_patterns", [])

    @property
    def host_headers(self) -> List[str]:
        return self.target.get("host_headers", [])

    @property
    def health_check(self) -> Dict[str, Any]:
        """Health check settings (path, interval, timeout, healthy_http_codes, ...)"""
        return self.target.get("health_check", {})

    @property
    def deregistration_delay(self) -> Optional[int]:
        """Deregistration delay in seconds"""
        return self.target.get("deregistration_delay")
