"""
Security resource factories.

Factories and components:
- iam_roles: Lambda execution role and managed policy attachment
"""

from infra.components.security.iam_roles import IAM_FACTORIES, IamRolesComponent

__all__ = [
    "IAM_FACTORIES",
    "IamRolesComponent",
]
