"""
Apps on ECS - services on an existing EC2 backed ECS cluster, declared with the AWS CDK.
"""

__version__ = "0.1.0"
