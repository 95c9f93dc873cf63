"""Unit tests for the app factory and the stack module registry"""

import json
import os
import shutil
import tempfile
import unittest

from aws_cdk.assertions import Match, Template

from apps_on_ecs.app import AppsOnEcsAppFactory
from apps_on_ecs.stack.stack_module_registry import StackModuleRegistry
from apps_on_ecs.stack_library.ecs.apps_on_ecs_stack import AppsOnEcsStack


def workload_document(stacks):
    return {
        "workload": {
            "name": "shop",
            "devops": {"account": "123456789012", "region": "us-east-1"},
            "vpc_name": "{{ENVIRONMENT}}-vpc",
            "deployments": [
                {"name": "dev", "environment": "dev"},
                {"name": "prod", "environment": "prod", "tags": {"CostCenter": "42"}},
            ],
            "stacks": stacks,
        }
    }


APPS_STACK = {
    "name": "apps",
    "module": "apps_on_ecs_stack",
    "apps_on_ecs": {
        "cluster": {"name": "{{ENVIRONMENT}}-cluster"},
        "services": [
            {
                "name": "web",
                "container": {
                    "image": "nginx:latest",
                    "cpu": 256,
                    "memory_limit_mib": 512,
                    "port_mappings": [{"container_port": 80}],
                    "environment": {"APP_ENV": "{{ENVIRONMENT}}"},
                },
                "load_balancer": {"name": "public"},
            }
        ],
    },
}


class TestStackModuleRegistry(unittest.TestCase):
    """Registry lookups"""

    def test_apps_on_ecs_stack_is_registered(self):
        self.assertIs(StackModuleRegistry.get("apps_on_ecs_stack"), AppsOnEcsStack)
        self.assertIs(StackModuleRegistry.get("apps_on_ecs_library_module"), AppsOnEcsStack)

    def test_unknown_module_raises(self):
        with self.assertRaises(ValueError) as context:
            StackModuleRegistry.get("does_not_exist")
        self.assertIn("apps_on_ecs_stack", str(context.exception))


class TestAppsOnEcsAppFactory(unittest.TestCase):
    """Config file -> CDK app"""

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def write_config(self, document):
        path = os.path.join(self.test_dir, "config.json")
        with open(path, "w") as f:
            json.dump(document, f)
        return path

    def test_build_named_deployment(self):
        path = self.write_config(workload_document([APPS_STACK]))

        factory = AppsOnEcsAppFactory(config_path=path, deployment_name="prod", outdir=self.test_dir)
        stacks = factory.build()

        self.assertEqual(len(stacks), 1)
        self.assertEqual(stacks[0].stack_name, "shop-prod-apps")
        self.assertEqual(factory.deployment.environment, "prod")
        self.assertEqual(factory.workload.vpc_name, "prod-vpc")

        template = Template.from_stack(stacks[0])
        template.has_resource_properties("AWS::ECS::Service", {"Cluster": "prod-cluster"})
        template.has_resource_properties(
            "AWS::ECS::TaskDefinition",
            {
                "ContainerDefinitions": Match.array_with(
                    [
                        Match.object_like(
                            {"Environment": Match.array_with([{"Name": "APP_ENV", "Value": "prod"}])}
                        )
                    ]
                )
            },
        )

    def test_first_deployment_is_the_default(self):
        path = self.write_config(workload_document([APPS_STACK]))

        factory = AppsOnEcsAppFactory(config_path=path, outdir=self.test_dir)

        self.assertEqual(factory.deployment.name, "dev")

    def test_unknown_deployment_raises(self):
        path = self.write_config(workload_document([APPS_STACK]))

        with self.assertRaises(ValueError):
            AppsOnEcsAppFactory(config_path=path, deployment_name="qa", outdir=self.test_dir)

    def test_disabled_stack_is_skipped(self):
        disabled = dict(APPS_STACK, enabled=False)
        path = self.write_config(workload_document([disabled]))

        factory = AppsOnEcsAppFactory(config_path=path, outdir=self.test_dir)

        self.assertEqual(factory.build(), [])

    def test_unknown_stack_module_raises(self):
        path = self.write_config(workload_document([dict(APPS_STACK, module="nope")]))

        factory = AppsOnEcsAppFactory(config_path=path, outdir=self.test_dir)

        with self.assertRaises(ValueError):
            factory.build()

    def test_missing_config_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            AppsOnEcsAppFactory(config_path=os.path.join(self.test_dir, "missing.json"))


if __name__ == "__main__":
    unittest.main()
