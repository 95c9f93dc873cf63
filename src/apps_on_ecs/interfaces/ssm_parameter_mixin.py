"""
Geek Cafe, LLC
Maintainers: Eric Wilson
MIT License. See Project Root for the license information.
"""

from typing import Dict, Any, Optional
from aws_cdk import aws_ssm as ssm
from constructs import Construct
from aws_lambda_powertools import Logger

logger = Logger(__name__)


class SsmParameterMixin:
    """
    A mixin class that provides SSM parameter export functionality
    for CDK stacks.

    Stacks collect the values they can publish (DNS names, ids, arns) and
    the configuration decides which of them are written, and where:
        "ssm": {"exports": {"public-web_dns_name": "/dev/shop/alb/public-web/dns-name"}}
    Relative paths are prefixed with /{environment}/{workload}/.
    """

    @staticmethod
    def resolve_ssm_path(path: str, deployment: Any) -> str:
        """
        Resolve SSM parameter path (handle relative vs absolute paths).

        Args:
            path: The parameter path from configuration
            deployment: The deployment configuration for context

        Returns:
            Fully resolved SSM parameter path
        """
        if not path.startswith("/"):
            return f"/{deployment.environment}/{deployment.workload_name}/{path}"
        return path

    def export_ssm_parameter(
        self,
        scope: Construct,
        id: str,
        value: str,
        parameter_name: str,
        description: str = None,
    ) -> Optional[ssm.StringParameter]:
        """
        Export a value to SSM Parameter Store.

        Args:
            scope: The CDK construct scope
            id: The construct ID for the SSM parameter
            value: The value to store in the parameter
            parameter_name: The name of the parameter in SSM
            description: Optional description for the parameter

        Returns:
            The created SSM parameter
        """
        if not parameter_name:
            logger.warning(f"No SSM parameter name provided for {id}, skipping export")
            return None

        logger.info(f"Exporting SSM parameter: {parameter_name}")

        return ssm.StringParameter(
            scope=scope,
            id=id,
            string_value=value,
            parameter_name=parameter_name,
            description=description,
        )

    def export_ssm_parameters_from_config(
        self,
        scope: Construct,
        resource_values: Dict[str, Any],
        ssm_exports: Dict[str, str],
        deployment: Any,
        resource: str = "",
    ) -> Dict[str, ssm.StringParameter]:
        """
        Export multiple SSM parameters based on the configured export paths.

        Args:
            scope: The CDK construct scope
            resource_values: Dictionary containing values available for export
            ssm_exports: Dictionary mapping keys to SSM parameter paths
            deployment: The deployment configuration (relative path resolution)
            resource: Optional resource name for the parameter IDs

        Returns:
            Dictionary of created SSM parameters

        Raises:
            ValueError: If an export key has no matching resource value
        """
        if not ssm_exports:
            logger.info(f"No SSM export paths configured for {resource or 'stack'} resources")
            logger.info(f"The following SSM exports are available: {list(resource_values.keys())}")
            return {}

        missing_keys = [key for key in ssm_exports if key not in resource_values]
        if missing_keys:
            message = (
                f"The following SSM export keys are missing: {missing_keys}. "
                f"The accepted keys are: {list(resource_values.keys())}. "
                "Please check your configuration. Some keys may be misspelled."
            )
            logger.error(message)
            raise ValueError(message)

        parameters = {}
        for key, path in ssm_exports.items():
            if not path:
                # nothing configured for this key which is acceptable
                continue

            param = self.export_ssm_parameter(
                scope=scope,
                id=f"{resource}{key.replace('_', '-')}-param",
                value=str(resource_values[key]),
                parameter_name=self.resolve_ssm_path(path, deployment),
                description=f"Exported {key} from {resource or 'stack'}",
            )
            if param:
                parameters[key] = param

        return parameters
