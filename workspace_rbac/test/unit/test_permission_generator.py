# workspace_rbac/test/unit/test_permission_generator.py

# Para Rodar o Script:
# pytest workspace_rbac/test/unit/test_permission_generator.py -v

from workspace_rbac.domain.models.permission import Action, Resource, get_permission_name, parse_permission_name
from workspace_rbac.domain.services.permission_generator import (
    PermissionGenerator,
    iter_valid_combinations,
    permission_generator,
)


class TestPermissionGenerator:

    def test_full_catalog_size(self):
        permissions = permission_generator.generate_all_permissions()
        # 7 resources x 7 actions, minus UPLOAD on the six non-designer resources
        assert len(permissions) == len(Resource) * len(Action) - (len(Resource) - 1)
        assert len(permissions) == 43

    def test_names_are_unique(self):
        names = [p.name for p in permission_generator.generate_all_permissions()]
        assert len(names) == len(set(names))

    def test_upload_only_for_designer(self):
        uploads = [p for p in permission_generator.generate_all_permissions() if p.action == Action.UPLOAD]
        assert [p.name for p in uploads] == ["designer.upload"]

    def test_restricted_enumeration(self):
        permissions = permission_generator.generate_all_permissions(
            resources=[Resource.CAMPAIGN, Resource.DESIGNER],
            actions=[Action.VIEW, Action.UPLOAD],
        )
        assert sorted(p.name for p in permissions) == ["campaign.view", "designer.upload", "designer.view"]

    def test_description_format(self):
        permission = permission_generator.generate_resource_permissions(Resource.SOCIAL_MEDIA)[0]
        assert permission.description == f"{permission.action.value} permission for social_media"

    def test_resource_permissions(self):
        campaign = permission_generator.generate_resource_permissions(Resource.CAMPAIGN)
        assert len(campaign) == len(Action) - 1
        assert all(p.resource == Resource.CAMPAIGN for p in campaign)

        designer = permission_generator.generate_resource_permissions(Resource.DESIGNER)
        assert len(designer) == len(Action)

    def test_action_permissions(self):
        impersonate = permission_generator.generate_action_permissions(Action.IMPERSONATE)
        assert len(impersonate) == len(Resource)
        assert "user.impersonate" in {p.name for p in impersonate}

    def test_generator_matches_combination_iterator(self):
        generated = {(p.resource, p.action) for p in PermissionGenerator().generate_all_permissions()}
        assert generated == set(iter_valid_combinations())


class TestPermissionNames:

    def test_name_roundtrip(self):
        name = get_permission_name(Resource.SOCIAL_MEDIA, Action.APPROVE)
        assert name == "social_media.approve"
        assert parse_permission_name(name) == (Resource.SOCIAL_MEDIA, Action.APPROVE)

    def test_parse_rejects_malformed_names(self):
        assert parse_permission_name("campaign") is None
        assert parse_permission_name("campaign.view.extra") is None
        assert parse_permission_name("unknown.view") is None
        assert parse_permission_name("campaign.fly") is None

    def test_is_valid_permission_name(self):
        assert permission_generator.is_valid_permission_name("designer.upload")
        assert not permission_generator.is_valid_permission_name("campaign.upload")
        assert not permission_generator.is_valid_permission_name("nope")
