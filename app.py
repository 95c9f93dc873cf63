#!/usr/bin/env python3
"""
CDK App entry point: synthesizes the workload described by the config file.

    cdk synth -c config_path=samples/apps_on_ecs/config.json -c deployment_name=dev
"""

import os

import aws_cdk as cdk

from apps_on_ecs.app import AppsOnEcsAppFactory


def main():
    """Run the app"""
    app = cdk.App()
    config_path = app.node.try_get_context("config_path") or os.getenv("CONFIG_PATH")
    if not config_path:
        raise ValueError("No config file given. Use -c config_path=... or set CONFIG_PATH")

    factory = AppsOnEcsAppFactory(
        config_path=config_path,
        deployment_name=app.node.try_get_context("deployment_name"),
        app=app,
    )
    factory.synth()


if __name__ == "__main__":
    main()
