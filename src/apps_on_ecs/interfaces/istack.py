"""
Geek Cafe, LLC
Maintainers: Eric Wilson
MIT License. See Project Root for the license information.
"""

from abc import ABCMeta, abstractmethod

import aws_cdk as cdk
import jsii
from constructs import Construct

from apps_on_ecs.configurations.deployment import DeploymentConfig
from apps_on_ecs.configurations.stack import StackConfig
from apps_on_ecs.configurations.workload import WorkloadConfig


class StackABCMeta(jsii.JSIIMeta, ABCMeta):
    """Combines the jsii metaclass of cdk.Stack with ABCMeta"""


class IStack(cdk.Stack, metaclass=StackABCMeta):
    """
    Interface for every stack module.
    Stacks are created first and then built from their configuration.
    """

    @abstractmethod
    def __init__(self, scope: Construct, id: str, **kwargs) -> None:
        super().__init__(scope, id, **kwargs)

    @abstractmethod
    def build(
        self,
        stack_config: StackConfig,
        deployment: DeploymentConfig,
        workload: WorkloadConfig,
    ) -> None:
        """Build the stack"""
        pass
