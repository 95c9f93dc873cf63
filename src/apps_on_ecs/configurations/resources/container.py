"""
Container Configuration

Defines the container of a service and its optional EFS mounts.
"""

from typing import Any, Dict, List, Optional


class EfsMountMapping:
    """One (efs path, container path, volume name) mapping"""

    def __init__(self, config: Dict[str, Any]) -> None:
        self._config = config or {}

    @property
    def efs_path(self) -> str:
        """Root directory of the access point on the file system"""
        path = self._config.get("efs_path")
        if not path:
            raise ValueError("efs_mount.mount_mappings[].efs_path is required")
        return path

    @property
    def container_path(self) -> str:
        path = self._config.get("container_path")
        if not path:
            raise ValueError("efs_mount.mount_mappings[].container_path is required")
        return path

    @property
    def source_volume(self) -> str:
        """Task definition volume name"""
        volume = self._config.get("source_volume")
        if not volume:
            raise ValueError("efs_mount.mount_mappings[].source_volume is required")
        return volume

    @property
    def read_only(self) -> bool:
        return self._config.get("read_only", False)


class EfsMountConfig:
    """
    EFS mount settings for a container.

    An existing file system / security group is reused when its id is
    given, otherwise a new one is created for the service.
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self._config = config or {}

    @property
    def efs_id(self) -> Optional[str]:
        """Existing file system id"""
        return self._config.get("efs_id")

    @property
    def efs_security_group_id(self) -> Optional[str]:
        """Existing security group used by the file system"""
        return self._config.get("efs_security_group_id")

    @property
    def mount_mappings(self) -> List[EfsMountMapping]:
        return [EfsMountMapping(m) for m in self._config.get("mount_mappings", [])]


class ContainerConfig:
    """
    Container definition settings.

    Example:
        {
            "image": "nginx:latest",
            "cpu": 256,
            "memory_limit_mib": 512,
            "port_mappings": [{"container_port": 80, "name": "web"}],
            "environment": {"APP_ENV": "dev"},
            "efs_mount": {"mount_mappings": [...]}
        }
    """

    def __init__(self, config: Dict[str, Any]) -> None:
        self._config = config or {}

    @property
    def dictionary(self) -> Dict[str, Any]:
        return self._config

    @property
    def image(self) -> str:
        """Container image (registry reference)"""
        return self._config.get("image", "public.ecr.aws/nginx/nginx:latest")

    @property
    def cpu(self) -> Optional[int]:
        """CPU units"""
        return self._config.get("cpu")

    @property
    def memory_limit_mib(self) -> Optional[int]:
        """Hard memory limit"""
        return self._config.get("memory_limit_mib")

    @property
    def memory_reservation_mib(self) -> Optional[int]:
        """Soft memory limit"""
        return self._config.get("memory_reservation_mib")

    @property
    def has_sizing(self) -> bool:
        """Both cpu and memory limit are set (and non zero)"""
        return bool(self.cpu) and bool(self.memory_limit_mib)

    @property
    def port_mappings(self) -> List[Dict[str, Any]]:
        return self._config.get("port_mappings", [])

    @property
    def environment(self) -> Dict[str, str]:
        return self._config.get("environment", {})

    @property
    def command(self) -> Optional[List[str]]:
        return self._config.get("command")

    @property
    def essential(self) -> bool:
        return self._config.get("essential", True)

    @property
    def efs_mount(self) -> Optional[EfsMountConfig]:
        """EFS mount settings or None"""
        efs_mount = self._config.get("efs_mount")
        if not efs_mount:
            return None
        return EfsMountConfig(efs_mount)
