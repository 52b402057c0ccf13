"""
Pulumi program entry point for the Info API infrastructure.

Runs in dependency order:
1. Configuration (stack name becomes the API stage)
2. Topology descriptor (validated before anything reaches Pulumi)
3. Topology component (VPC -> routing -> IAM -> Lambda -> API Gateway)
4. Exports
"""

import pulumi

from infra.components.topology import TopologyComponent
from infra.configs.constants import OUTPUTS_ENV_FILE
from infra.configs.environment import get_config
from infra.observability.logger import configure_logging
from infra.topology.builder import build_topology
from infra.utils.outputs import write_outputs_to_env


def main() -> None:
    """Deploy the Info API infrastructure."""
    configure_logging()

    # Load configuration
    config = get_config()

    # Build and validate the descriptor
    topology = build_topology(config)
    pulumi.log.info(
        f"Declaring {len(topology.graph)} resources for stage {config.stage}"
    )

    info_api = TopologyComponent(config.project, topology)
    topology_outputs = info_api.get_outputs()

    # --- Exports ---
    outputs = {
        "private_subnet_cidr": topology_outputs.private_subnet_cidr,
        "public_subnet_cidr": topology_outputs.public_subnet_cidr,
        "lambda_function_arn": topology_outputs.lambda_function_arn,
        "endpoint": topology_outputs.endpoint,
    }

    # Write outputs to .env file for local development
    write_outputs_to_env(outputs, OUTPUTS_ENV_FILE)

    # Export to Pulumi stack
    for key, value in outputs.items():
        pulumi.export(key, value)


# Execute
main()
