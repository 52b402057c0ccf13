"""
Resource naming conventions for consistent logical names.

Follows pattern: {project}-{resource}
"""

from dataclasses import dataclass


@dataclass
class ResourceNamer:
    """
    Generates consistent logical names for topology resources.

    Pulumi already scopes every URN by stack, so the stage is not repeated
    here and names stay identical across stages.

    Attributes:
        project: Project identifier
    """
    project: str

    def name(self, resource: str) -> str:
        """
        Generate a logical resource name.

        Args:
            resource: Resource identifier (e.g., 'vpc', 'private-subnet')

        Returns:
            Formatted resource name
        """
        return f"{self.project}-{resource}"
