"""
Apps on ECS Stack Module

Places a list of services on an existing EC2 backed ECS cluster. Every
service gets its own task definition, container and ECS service, an
optional EFS mount, a target group behind a (possibly shared) Application
Load Balancer and optional task autoscaling.
"""

from typing import Optional, Dict, Any, List

from aws_cdk import (
    aws_ecs as ecs,
    aws_ec2 as ec2,
    aws_efs as efs,
    aws_elasticloadbalancingv2 as elbv2,
    aws_iam as iam,
    aws_logs as logs,
    CfnOutput,
    Duration,
)
from aws_lambda_powertools import Logger
from constructs import Construct

from apps_on_ecs.configurations.deployment import DeploymentConfig
from apps_on_ecs.configurations.resources.apps_on_ecs import AppsOnEcsConfig
from apps_on_ecs.configurations.resources.auto_scaling import TaskAutoScalingConfig
from apps_on_ecs.configurations.resources.container import ContainerConfig
from apps_on_ecs.configurations.resources.ecs_cluster import ServiceConnectConfig
from apps_on_ecs.configurations.resources.ecs_service import EcsServiceConfig
from apps_on_ecs.configurations.resources.load_balancer import LoadBalancerConfig
from apps_on_ecs.configurations.stack import StackConfig
from apps_on_ecs.configurations.workload import WorkloadConfig
from apps_on_ecs.interfaces.istack import IStack
from apps_on_ecs.interfaces.ssm_parameter_mixin import SsmParameterMixin
from apps_on_ecs.interfaces.vpc_provider_mixin import VPCProviderMixin
from apps_on_ecs.stack.stack_module_registry import register_stack

logger = Logger(service="AppsOnEcsStack")

RETENTION_DAYS = {
    1: logs.RetentionDays.ONE_DAY,
    3: logs.RetentionDays.THREE_DAYS,
    5: logs.RetentionDays.FIVE_DAYS,
    7: logs.RetentionDays.ONE_WEEK,
    14: logs.RetentionDays.TWO_WEEKS,
    30: logs.RetentionDays.ONE_MONTH,
    60: logs.RetentionDays.TWO_MONTHS,
    90: logs.RetentionDays.THREE_MONTHS,
    180: logs.RetentionDays.SIX_MONTHS,
    365: logs.RetentionDays.ONE_YEAR,
}


@register_stack("apps_on_ecs_library_module")
@register_stack("apps_on_ecs_stack")
class AppsOnEcsStack(IStack, VPCProviderMixin, SsmParameterMixin):
    """
    Builds the services of the "apps_on_ecs" configuration.

    Load balancers are keyed by name: the first service that names a load
    balancer creates it together with its port 80 listener, every later
    service with the same name adds its target group to that listener.
    """

    def __init__(self, scope: Construct, id: str, **kwargs) -> None:
        super().__init__(scope, id, **kwargs)

        self._initialize_vpc_cache()

        self.apps_config: Optional[AppsOnEcsConfig] = None
        self.stack_config: Optional[StackConfig] = None
        self.deployment: Optional[DeploymentConfig] = None
        self.workload: Optional[WorkloadConfig] = None

        self.ecs_cluster: Optional[ecs.ICluster] = None
        self.db_security_group: Optional[ec2.SecurityGroup] = None
        self.app_security_group: Optional[ec2.SecurityGroup] = None
        self.lb_security_group: Optional[ec2.SecurityGroup] = None
        self.log_group: Optional[logs.LogGroup] = None

        # lookup tables, keyed by load balancer name / service name
        self.load_balancers: Dict[str, elbv2.ApplicationLoadBalancer] = {}
        self.listeners: Dict[str, elbv2.ApplicationListener] = {}
        self.ecs_services: Dict[str, ecs.Ec2Service] = {}
        self.target_groups: Dict[str, elbv2.ApplicationTargetGroup] = {}
        self.file_systems: Dict[str, List[efs.IFileSystem]] = {}
        self.skipped_services: List[str] = []

    def build(
        self,
        stack_config: StackConfig,
        deployment: DeploymentConfig,
        workload: WorkloadConfig,
    ) -> None:
        """Build the Apps on ECS stack"""
        self._build(stack_config, deployment, workload)

    def _build(
        self,
        stack_config: StackConfig,
        deployment: DeploymentConfig,
        workload: WorkloadConfig,
    ) -> None:
        """Internal build method for the Apps on ECS stack"""
        self.stack_config = stack_config
        self.deployment = deployment
        self.workload = workload

        self.apps_config = AppsOnEcsConfig(stack_config.dictionary.get("apps_on_ecs", {}))
        stack_name = deployment.build_resource_name(self.apps_config.name)

        logger.info(f"Creating Apps on ECS stack: {stack_name}")

        asg = self.apps_config.asg
        asg.validate()
        logger.info(
            f"Cluster capacity: {asg.instance_type} ({asg.machine_image}) x {asg.desired_capacity} "
            f"(min {asg.min_capacity}, max {asg.max_capacity}, cooldown {asg.cooldown}s)"
        )

        self.vpc = self.resolve_vpc(config=self.apps_config, workload=workload)
        self.ecs_cluster = self._import_ecs_cluster()

        self._create_security_groups()
        self._create_log_group()

        service_connect = self.apps_config.service_connect
        for service in self.apps_config.services:
            self._create_service(service, service_connect)

        if self.skipped_services:
            logger.warning(f"Skipped services: {', '.join(self.skipped_services)}")

        self._export_ssm_parameters()

        logger.info(f"Apps on ECS stack created: {stack_name}")

    def _import_ecs_cluster(self) -> ecs.ICluster:
        """Import the existing cluster and its container instance security groups."""
        cluster_config = self.apps_config.cluster

        cluster_security_groups = [
            ec2.SecurityGroup.from_lookup_by_id(self, sg_id, sg_id)
            for sg_id in cluster_config.security_group_ids
        ]

        logger.info(f"Importing ECS cluster: {cluster_config.name}")
        return ecs.Cluster.from_cluster_attributes(
            self,
            "ecs-cluster",
            vpc=self.vpc,
            cluster_name=cluster_config.name,
            security_groups=cluster_security_groups,
            has_ec2_capacity=cluster_config.has_ec2_capacity,
        )

    def _create_security_groups(self) -> None:
        """
        Database, application and load balancer security groups.

        Ingress: load balancer -> app tcp/80, app -> database tcp/3306,
        app -> app on every tcp port (service to service traffic).
        """
        self.db_security_group = ec2.SecurityGroup(self, "DBSG", vpc=self.vpc)
        self.app_security_group = ec2.SecurityGroup(self, "AppSG", vpc=self.vpc)
        self.lb_security_group = ec2.SecurityGroup(self, "LBSG", vpc=self.vpc)

        self.db_security_group.add_ingress_rule(
            self.app_security_group, ec2.Port.tcp(3306), "Database access for the apps"
        )
        self.app_security_group.add_ingress_rule(
            self.lb_security_group, ec2.Port.tcp(80), "Access from the load balancer"
        )
        self.app_security_group.add_ingress_rule(
            self.app_security_group, ec2.Port.all_tcp(), "Service to service"
        )

        logger.info("Security groups created")

    def _create_log_group(self) -> None:
        days = self.apps_config.log_retention_days
        retention = RETENTION_DAYS.get(days)
        if not retention:
            raise ValueError(
                f"Unsupported log_retention_days: {days}. "
                f"Supported values: {sorted(RETENTION_DAYS.keys())}"
            )

        self.log_group = logs.LogGroup(self, "log-group", retention=retention)

    def _create_service(
        self,
        service: EcsServiceConfig,
        service_connect: Optional[ServiceConnectConfig],
    ) -> None:
        """Create every resource of one service, in dependency order."""
        name = service.name
        container = service.container

        if not container.has_sizing:
            logger.warning(
                f"Skipping service '{name}': the container requires both cpu and memory_limit_mib"
            )
            self.skipped_services.append(name)
            return

        logger.info(f"Creating service: {name}")

        task_definition = self._create_task_definition(name, container, service_connect)

        self.file_systems[name] = []
        if container.efs_mount:
            self._create_efs_mount(name, container, task_definition)

        container_definition = self._add_container(name, container, task_definition)

        ecs_service = self._create_ecs_service(service, task_definition, service_connect)
        self.ecs_services[name] = ecs_service

        target_group = self._add_load_balancer_target(
            name, service.load_balancer, ecs_service, container_definition
        )
        self.target_groups[name] = target_group

        if service.autoscaling:
            self._configure_autoscaling(name, service.autoscaling, ecs_service, target_group)

        self._export_file_systems(name, ecs_service)

        logger.info(f"Service created: {name}")

    def _create_task_definition(
        self,
        name: str,
        container: ContainerConfig,
        service_connect: Optional[ServiceConnectConfig],
    ) -> ecs.TaskDefinition:
        if service_connect:
            # room for the service connect proxy next to the app container
            return ecs.TaskDefinition(
                self,
                f"task-def-{name}",
                compatibility=ecs.Compatibility.EC2,
                network_mode=ecs.NetworkMode.AWS_VPC,
                cpu=str(container.cpu + service_connect.proxy_cpu),
                memory_mib=str(container.memory_limit_mib + service_connect.proxy_memory_limit),
            )

        return ecs.Ec2TaskDefinition(
            self,
            f"task-def-{name}",
            network_mode=ecs.NetworkMode.AWS_VPC,
        )

    def _create_efs_mount(
        self,
        name: str,
        container: ContainerConfig,
        task_definition: ecs.TaskDefinition,
    ) -> None:
        """Reuse or create the file system, then one access point and volume per mapping."""
        efs_mount = container.efs_mount

        if efs_mount.efs_security_group_id:
            efs_security_group = ec2.SecurityGroup.from_security_group_id(
                self,
                f"efs-sg-{name}",
                efs_mount.efs_security_group_id,
                allow_all_outbound=False,
            )
        else:
            efs_security_group = ec2.SecurityGroup(
                self,
                f"efs-sg-{name}",
                vpc=self.vpc,
                allow_all_outbound=False,
                description="Security group used by EFS",
            )

        if efs_mount.efs_id:
            logger.info(f"Reusing file system {efs_mount.efs_id} for service {name}")
            file_system = efs.FileSystem.from_file_system_attributes(
                self,
                f"ecs-efs-{name}",
                file_system_id=efs_mount.efs_id,
                security_group=efs_security_group,
            )
        else:
            logger.info(f"Creating file system for service {name}")
            file_system = efs.FileSystem(
                self,
                f"ecs-efs-{name}",
                vpc=self.vpc,
                encrypted=True,
                lifecycle_policy=efs.LifecyclePolicy.AFTER_14_DAYS,
                performance_mode=efs.PerformanceMode.GENERAL_PURPOSE,
                throughput_mode=efs.ThroughputMode.BURSTING,
                security_group=efs_security_group,
            )

        for index, mapping in enumerate(efs_mount.mount_mappings):
            access_point = efs.AccessPoint(
                self,
                f"efs-ap-{name}-{index}",
                file_system=file_system,
                path=mapping.efs_path,
            )
            access_point.node.add_dependency(file_system)

            mount_policy = iam.PolicyStatement(
                actions=["elasticfilesystem:ClientMount"],
                resources=[access_point.access_point_arn, file_system.file_system_arn],
            )
            task_definition.add_to_task_role_policy(mount_policy)
            task_definition.add_to_execution_role_policy(mount_policy)

            task_definition.add_volume(
                name=mapping.source_volume,
                efs_volume_configuration=ecs.EfsVolumeConfiguration(
                    file_system_id=file_system.file_system_id,
                    transit_encryption="ENABLED",
                    authorization_config=ecs.AuthorizationConfig(
                        access_point_id=access_point.access_point_id,
                    ),
                ),
            )

        self.file_systems[name].append(file_system)

    def _add_container(
        self,
        name: str,
        container: ContainerConfig,
        task_definition: ecs.TaskDefinition,
    ) -> ecs.ContainerDefinition:
        port_mappings = [
            ecs.PortMapping(
                container_port=int(pm["container_port"]),
                host_port=pm.get("host_port"),
                name=pm.get("name"),
                protocol=ecs.Protocol.UDP if str(pm.get("protocol", "tcp")).lower() == "udp" else ecs.Protocol.TCP,
            )
            for pm in container.port_mappings
        ]

        container_definition = task_definition.add_container(
            f"cntr-{name}",
            image=ecs.ContainerImage.from_registry(container.image),
            cpu=container.cpu,
            memory_limit_mib=container.memory_limit_mib,
            memory_reservation_mib=container.memory_reservation_mib,
            port_mappings=port_mappings or None,
            environment=container.environment or None,
            command=container.command,
            essential=container.essential,
            logging=ecs.LogDrivers.aws_logs(
                log_group=self.log_group,
                stream_prefix=name,
            ),
        )

        if container.efs_mount:
            for mapping in container.efs_mount.mount_mappings:
                container_definition.add_mount_points(
                    ecs.MountPoint(
                        container_path=mapping.container_path,
                        source_volume=mapping.source_volume,
                        read_only=mapping.read_only,
                    )
                )

        return container_definition

    def _create_ecs_service(
        self,
        service: EcsServiceConfig,
        task_definition: ecs.TaskDefinition,
        service_connect: Optional[ServiceConnectConfig],
    ) -> ecs.Ec2Service:
        name = service.name

        service_connect_configuration = None
        if service_connect:
            port_mappings = service.container.port_mappings
            if port_mappings:
                port_mapping_name = port_mappings[0].get("name") or name
                port = int(port_mappings[0]["container_port"])
            else:
                port_mapping_name = name
                port = service_connect.default_port

            service_connect_configuration = ecs.ServiceConnectProps(
                namespace=service_connect.dns_namespace,
                services=[
                    ecs.ServiceConnectService(
                        port_mapping_name=port_mapping_name,
                        port=port,
                    )
                ],
                log_driver=ecs.LogDrivers.aws_logs(
                    log_group=self.log_group,
                    stream_prefix=f"{name}-envoy",
                ),
            )

        return ecs.Ec2Service(
            self,
            f"alb-svc-{name}",
            cluster=self.ecs_cluster,
            task_definition=task_definition,
            assign_public_ip=False,
            vpc_subnets=ec2.SubnetSelection(subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS),
            security_groups=[self.app_security_group],
            desired_count=service.desired_count,
            placement_strategies=[self._placement_strategy(s) for s in service.placement_strategies] or None,
            placement_constraints=[self._placement_constraint(c) for c in service.placement_constraints] or None,
            max_healthy_percent=service.max_healthy_percent,
            min_healthy_percent=service.min_healthy_percent,
            service_connect_configuration=service_connect_configuration,
        )

    def _get_or_create_listener(
        self, service_name: str, lb_config: LoadBalancerConfig
    ) -> elbv2.ApplicationListener:
        """Return the listener of the named load balancer, creating both on first use."""
        alb_name = lb_config.name
        protocol = elbv2.ApplicationProtocol[lb_config.listener_protocol]
        listener = self.listeners.get(alb_name)
        if listener:
            logger.info(f"Reusing load balancer {alb_name} for service {service_name}")
            return listener

        logger.info(f"Creating load balancer {alb_name} for service {service_name}")
        load_balancer = elbv2.ApplicationLoadBalancer(
            self,
            alb_name,
            vpc=self.vpc,
            internet_facing=True,
            security_group=self.lb_security_group,
        )
        listener = load_balancer.add_listener(
            f"listener-{service_name}",
            port=80,
            protocol=protocol,
            open=lb_config.listener_open,
        )

        CfnOutput(
            self,
            f"ecsLbDnsName-{alb_name}",
            value=load_balancer.load_balancer_dns_name,
            description="ECS Load Balancer DNS Name",
        )

        self.load_balancers[alb_name] = load_balancer
        self.listeners[alb_name] = listener
        return listener

    def _add_load_balancer_target(
        self,
        name: str,
        lb_config: LoadBalancerConfig,
        ecs_service: ecs.Ec2Service,
        container_definition: ecs.ContainerDefinition,
    ) -> elbv2.ApplicationTargetGroup:
        conditions = []
        if lb_config.path_patterns:
            conditions.append(elbv2.ListenerCondition.path_patterns(lb_config.path_patterns))
        if lb_config.host_headers:
            conditions.append(elbv2.ListenerCondition.host_headers(lb_config.host_headers))

        # a target without a rule replaces the listener's default action
        if lb_config.name in self.listeners and (lb_config.priority is None or not conditions):
            raise ValueError(
                f"Service '{name}' shares load balancer '{lb_config.name}' with another "
                "service and needs target.priority plus path_patterns or host_headers"
            )

        listener = self._get_or_create_listener(name, lb_config)

        target_props: Dict[str, Any] = {}
        if conditions:
            target_props["conditions"] = conditions
        if lb_config.priority is not None:
            target_props["priority"] = int(lb_config.priority)
        if lb_config.health_check:
            target_props["health_check"] = self._health_check(lb_config.health_check)
        if lb_config.deregistration_delay is not None:
            target_props["deregistration_delay"] = Duration.seconds(lb_config.deregistration_delay)

        return listener.add_targets(
            f"tg-{name}",
            port=80,
            target_group_name=f"tg-{name}",
            targets=[
                ecs_service.load_balancer_target(
                    container_name=container_definition.container_name,
                )
            ],
            **target_props,
        )

    def _configure_autoscaling(
        self,
        name: str,
        autoscaling: TaskAutoScalingConfig,
        ecs_service: ecs.Ec2Service,
        target_group: elbv2.ApplicationTargetGroup,
    ) -> None:
        scaling = ecs_service.auto_scale_task_count(
            min_capacity=autoscaling.min_capacity,
            max_capacity=autoscaling.max_capacity,
        )

        cooldowns = {
            key: Duration.seconds(value)
            for key, value in autoscaling.cooldowns().items()
            if value is not None
        }

        if autoscaling.trigger == TaskAutoScalingConfig.CPU:
            scaling.scale_on_cpu_utilization(
                f"cpu-scaling-{name}",
                target_utilization_percent=autoscaling.target_utilization_percent,
                **cooldowns,
            )
        elif autoscaling.trigger == TaskAutoScalingConfig.REQUEST_COUNT:
            scaling.scale_on_request_count(
                f"req-count-scaling-{name}",
                requests_per_target=autoscaling.requests_per_target,
                target_group=target_group,
                **cooldowns,
            )
        else:
            logger.warning(f"Service '{name}' has autoscaling bounds but no cpu or request_count trigger")

    def _export_file_systems(self, name: str, ecs_service: ecs.Ec2Service) -> None:
        """Open NFS from the service to its file systems and output their ids."""
        for index, file_system in enumerate(self.file_systems.get(name, [])):
            file_system.connections.allow_default_port_from(ecs_service.connections)

            CfnOutput(
                self,
                f"ecsEfsArn-{name}-{index}",
                value=file_system.file_system_arn,
                description=f"ECS EFS ARN {index}",
            )
            CfnOutput(
                self,
                f"ecsEfsId-{name}-{index}",
                value=file_system.file_system_id,
                description=f"ECS EFS Id {index}",
            )

    def _export_ssm_parameters(self) -> None:
        """Export the configured SSM parameters"""
        resource_values: Dict[str, Any] = {
            "log_group_name": self.log_group.log_group_name,
            "db_security_group_id": self.db_security_group.security_group_id,
            "app_security_group_id": self.app_security_group.security_group_id,
            "lb_security_group_id": self.lb_security_group.security_group_id,
        }
        for alb_name, load_balancer in self.load_balancers.items():
            resource_values[f"{alb_name}_dns_name"] = load_balancer.load_balancer_dns_name
        for name, ecs_service in self.ecs_services.items():
            resource_values[f"{name}_service_name"] = ecs_service.service_name
            resource_values[f"{name}_service_arn"] = ecs_service.service_arn
        for name, file_systems in self.file_systems.items():
            for index, file_system in enumerate(file_systems):
                resource_values[f"{name}_efs_id_{index}"] = file_system.file_system_id
                resource_values[f"{name}_efs_arn_{index}"] = file_system.file_system_arn

        self.export_ssm_parameters_from_config(
            scope=self,
            resource_values=resource_values,
            ssm_exports=self.apps_config.ssm_exports,
            deployment=self.deployment,
            resource="apps-on-ecs-",
        )

    @staticmethod
    def _health_check(config: Dict[str, Any]) -> elbv2.HealthCheck:
        return elbv2.HealthCheck(
            path=config.get("path"),
            interval=Duration.seconds(config["interval"]) if config.get("interval") else None,
            timeout=Duration.seconds(config["timeout"]) if config.get("timeout") else None,
            healthy_threshold_count=config.get("healthy_threshold"),
            unhealthy_threshold_count=config.get("unhealthy_threshold"),
            healthy_http_codes=config.get("healthy_http_codes"),
        )

    @staticmethod
    def _placement_strategy(config: Dict[str, Any]) -> ecs.PlacementStrategy:
        strategy_type = config.get("type")
        field = config.get("field")

        if strategy_type == "spread":
            return ecs.PlacementStrategy.spread_across(field or ecs.BuiltInAttributes.AVAILABILITY_ZONE)
        if strategy_type == "spread_across_instances":
            return ecs.PlacementStrategy.spread_across_instances()
        if strategy_type == "binpack":
            if field == "cpu":
                return ecs.PlacementStrategy.packed_by_cpu()
            return ecs.PlacementStrategy.packed_by_memory()
        if strategy_type == "random":
            return ecs.PlacementStrategy.randomly()

        raise ValueError(
            f"Unknown placement strategy type: {strategy_type}. "
            "Expected one of: spread, spread_across_instances, binpack, random"
        )

    @staticmethod
    def _placement_constraint(config: Dict[str, Any]) -> ecs.PlacementConstraint:
        constraint_type = config.get("type")

        if constraint_type == "distinct_instance":
            return ecs.PlacementConstraint.distinct_instances()
        if constraint_type == "member_of":
            return ecs.PlacementConstraint.member_of(*config.get("expressions", []))

        raise ValueError(
            f"Unknown placement constraint type: {constraint_type}. "
            "Expected one of: distinct_instance, member_of"
        )
