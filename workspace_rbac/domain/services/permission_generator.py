# workspace_rbac/domain/services/permission_generator.py

"""
Permission catalog generation.

Enumerates the Resource x Action cross-product that may exist in the
catalog. Every caller that needs "all valid combinations" (seeding,
workspace bootstrap, name validation) goes through iter_valid_combinations
so the UPLOAD/DESIGNER filter is applied in exactly one place.
"""

from typing import Iterable, Iterator, List, Optional, Tuple

from workspace_rbac.domain.models.permission import (
    Action,
    PermissionData,
    Resource,
    get_permission_name,
    is_valid_combination,
    parse_permission_name,
)


def iter_valid_combinations(
        resources: Optional[Iterable[Resource]] = None,
        actions: Optional[Iterable[Action]] = None,
) -> Iterator[Tuple[Resource, Action]]:
    """Yield every (resource, action) pair that passes the combination filter."""
    resources = list(resources) if resources is not None else list(Resource)
    actions = list(actions) if actions is not None else list(Action)

    for resource in resources:
        for action in actions:
            if is_valid_combination(resource, action):
                yield resource, action


class PermissionGenerator:
    """Builds candidate catalog entries. Pure, no storage access."""

    @staticmethod
    def _build(resource: Resource, action: Action) -> PermissionData:
        return PermissionData(
            name=get_permission_name(resource, action),
            description=f"{action.value} permission for {resource.value}",
            resource=resource,
            action=action,
        )

    def generate_all_permissions(
            self,
            resources: Optional[Iterable[Resource]] = None,
            actions: Optional[Iterable[Action]] = None,
    ) -> List[PermissionData]:
        """
        Generate the full catalog.

        Args:
            resources: Optional subset of resources (defaults to all)
            actions: Optional subset of actions (defaults to all)

        Returns:
            One PermissionData per valid combination
        """
        return [self._build(r, a) for r, a in iter_valid_combinations(resources, actions)]

    def generate_resource_permissions(self, resource: Resource) -> List[PermissionData]:
        """Generate the catalog entries of a single resource."""
        return self.generate_all_permissions(resources=[Resource(resource)])

    def generate_action_permissions(self, action: Action) -> List[PermissionData]:
        """Generate the catalog entries of a single action across resources."""
        return self.generate_all_permissions(actions=[Action(action)])

    @staticmethod
    def get_permission_name(resource: Resource, action: Action) -> str:
        return get_permission_name(resource, action)

    @staticmethod
    def parse_permission_name(permission_name: str) -> Optional[Tuple[Resource, Action]]:
        return parse_permission_name(permission_name)

    def is_valid_permission_name(self, permission_name: str) -> bool:
        """True if the name parses and survives the combination filter."""
        parsed = parse_permission_name(permission_name)
        if parsed is None:
            return False
        return is_valid_combination(*parsed)


permission_generator = PermissionGenerator()
