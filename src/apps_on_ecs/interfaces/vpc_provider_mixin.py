"""
VPC Provider Mixin - Reusable VPC resolution functionality
Maintainers: Eric Wilson
MIT License. See Project Root for license information.
"""

from typing import Optional, Any
from aws_lambda_powertools import Logger
from aws_cdk import aws_ec2 as ec2

logger = Logger(__name__)


class VPCProviderMixin:
    """
    Mixin class that provides reusable VPC resolution functionality for stacks.

    The VPC always exists already; it is resolved by a context lookup with
    a standardized priority order:
    - Config-level VPC id, then VPC name
    - Workload-level VPC id, then VPC name
    """

    def _initialize_vpc_cache(self) -> None:
        """Initialize the VPC cache attribute"""
        if not hasattr(self, "_vpc"):
            self._vpc: Optional[ec2.IVpc] = None

    def resolve_vpc(self, config: Any, workload: Any) -> ec2.IVpc:
        """
        Resolve the VPC by lookup.

        Args:
            config: The resource configuration (vpc_id / vpc_name)
            workload: The workload configuration (vpc_id / vpc_name)

        Returns:
            Resolved VPC reference

        Raises:
            ValueError: If no VPC configuration is found
        """
        if self._vpc:
            return self._vpc

        for source in (config, workload):
            vpc_id = getattr(source, "vpc_id", None)
            if vpc_id:
                logger.info(f"Looking up VPC by id: {vpc_id}")
                self._vpc = ec2.Vpc.from_lookup(self, "vpc", vpc_id=vpc_id)
                return self._vpc

            vpc_name = getattr(source, "vpc_name", None)
            if vpc_name:
                logger.info(f"Looking up VPC by name: {vpc_name}")
                self._vpc = ec2.Vpc.from_lookup(self, "vpc", vpc_name=vpc_name)
                return self._vpc

        raise self._create_vpc_not_found_error(config, workload)

    def _create_vpc_not_found_error(self, config: Any, workload: Any) -> ValueError:
        """
        Create a descriptive error message for missing VPC configuration.

        Args:
            config: The resource configuration
            workload: The workload configuration

        Returns:
            ValueError with descriptive message
        """
        config_name = getattr(config, "name", "unknown")
        workload_name = getattr(workload, "name", "unknown")

        return ValueError(
            f"VPC is not defined in the configuration for {config_name}. "
            f"You can provide it at the following locations:\n"
            f"  1. At the config level: vpc_id or vpc_name\n"
            f"  2. At the workload level: workload.vpc_id or workload.vpc_name\n"
            f"Current workload: {workload_name}"
        )
