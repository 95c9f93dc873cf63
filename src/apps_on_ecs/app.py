"""
Geek Cafe, LLC
Maintainers: Eric Wilson
MIT License. See Project Root for the license information.
"""

import os
from typing import Dict, List, Optional

import aws_cdk as cdk
from aws_cdk.cx_api import CloudAssembly
from aws_lambda_powertools import Logger

from apps_on_ecs.configurations.deployment import DeploymentConfig
from apps_on_ecs.configurations.stack import StackConfig
from apps_on_ecs.configurations.workload import WorkloadConfig
from apps_on_ecs.interfaces.istack import IStack
from apps_on_ecs.stack.stack_module_registry import StackModuleRegistry
from apps_on_ecs.utilities.json_loading_utility import JsonLoadingUtility

# registers the stack modules
import apps_on_ecs.stack_library  # noqa: F401

logger = Logger(service="AppsOnEcsAppFactory")


class AppsOnEcsAppFactory:
    """
    Builds a CDK app from a workload config file.

    The deployment is picked by name (argument, then the DEPLOYMENT_NAME
    environment variable, then the first deployment in the file). The
    placeholders {{ENVIRONMENT}}, {{WORKLOAD_NAME}}, {{AWS_ACCOUNT}} and
    {{AWS_REGION}} are resolved before any stack is built.
    """

    def __init__(
        self,
        config_path: str,
        deployment_name: Optional[str] = None,
        outdir: Optional[str] = None,
        app: Optional[cdk.App] = None,
    ) -> None:
        self.config_path = config_path
        self.deployment_name = deployment_name or os.getenv("DEPLOYMENT_NAME")
        self.app = app or cdk.App(outdir=outdir)
        self.stacks: List[IStack] = []

        raw = JsonLoadingUtility(config_path).load()
        deployment = self._select_deployment(WorkloadConfig(raw))
        replacements = self._replacements(raw, deployment)

        self.workload = WorkloadConfig(JsonLoadingUtility.recursive_replace(raw, replacements))
        self.deployment = DeploymentConfig(
            workload=self.workload.dictionary,
            deployment=JsonLoadingUtility.recursive_replace(deployment, replacements),
        )

    def _select_deployment(self, workload: WorkloadConfig) -> Dict:
        deployments = workload.deployments
        if not deployments:
            raise ValueError(f"No deployments defined in {self.config_path}")

        if not self.deployment_name:
            return deployments[0]

        for deployment in deployments:
            if deployment.get("name") == self.deployment_name:
                return deployment

        raise ValueError(
            f"Deployment '{self.deployment_name}' not found. "
            f"Available deployments: {[d.get('name') for d in deployments]}"
        )

    @staticmethod
    def _replacements(raw: Dict, deployment: Dict) -> Dict[str, str]:
        preview = DeploymentConfig(workload=raw, deployment=deployment)
        replacements = {
            "{{ENVIRONMENT}}": deployment.get("environment", ""),
            "{{WORKLOAD_NAME}}": preview.workload_name,
        }
        if preview.account:
            replacements["{{AWS_ACCOUNT}}"] = preview.account
        if preview.region:
            replacements["{{AWS_REGION}}"] = preview.region
        return replacements

    def build(self) -> List[IStack]:
        """Instantiate and build every enabled stack"""
        if not self.deployment.enabled:
            logger.warning(f"Deployment {self.deployment.name} is disabled, nothing to build")
            return self.stacks

        env = cdk.Environment(account=self.deployment.account, region=self.deployment.region)

        for stack_dict in self.workload.stacks:
            stack_config = StackConfig(stack_dict, workload=self.workload.dictionary)
            if not stack_config.enabled:
                logger.info(f"Stack {stack_config.name} is disabled, skipping")
                continue

            stack_class = StackModuleRegistry.get(stack_config.module)
            stack_name = self.deployment.build_resource_name(stack_config.name)

            logger.info(f"Building stack {stack_name} ({stack_config.module})")
            stack = stack_class(
                self.app,
                stack_name,
                env=env,
                description=stack_config.description,
            )
            for key, value in self.deployment.tags.items():
                cdk.Tags.of(stack).add(key, value)

            stack.build(stack_config, self.deployment, self.workload)
            self.stacks.append(stack)

        return self.stacks

    def synth(self) -> CloudAssembly:
        """Build the stacks and synthesize the cloud assembly"""
        if not self.stacks:
            self.build()
        return self.app.synth()
