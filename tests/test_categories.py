"""
Tests for the category registry

Tests:
- Creation and validation (code slug, uniqueness, SLA hours, name)
- Immutable code on update
- Listing order
- Seeding guarded on an empty registry
- YAML starter set
- Capability checks
"""
import pytest

from ispdesk.categories.domain import CategoryCode, DEFAULT_CATEGORIES
from ispdesk.categories.infrastructure import YAMLCategoryDefaultsProvider
from ispdesk.config import AuditAction
from ispdesk.core import (
    ConfigurationException,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

from conftest import ADMIN, MANAGER, SUPPORT


class TestCategoryCode:
    """Test the category reference value type"""

    @pytest.mark.parametrize("code", ["internet_issue", "billing", "fiber-cut", "l2"])
    def test_valid_codes(self, code):
        assert str(CategoryCode(code)) == code

    @pytest.mark.parametrize("code", ["", "Internet Issue", "_billing", "bill$", "BILLING", None])
    def test_invalid_codes(self, code):
        with pytest.raises(ValidationError):
            CategoryCode(code)


class TestCreateCategory:
    """Test CategoryRegistryService.create"""

    @pytest.mark.asyncio
    async def test_create(self, category_service):
        category = await category_service.create("Fiber Cut", "fiber_cut", 6, "Backbone damage", actor=ADMIN)

        assert category.code == "fiber_cut"
        assert category.sla_hours == 6
        assert (await category_service.get_by_code("fiber_cut")).id == category.id

    @pytest.mark.asyncio
    async def test_duplicate_code_rejected(self, category_service):
        await category_service.create("Billing", "billing", 24, actor=ADMIN)

        with pytest.raises(ValidationError):
            await category_service.create("Billing Again", "billing", 12, actor=ADMIN)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("hours", [0, -1, True, 1.5, "24"])
    async def test_non_positive_or_non_integer_sla_rejected(self, category_service, hours):
        with pytest.raises(ValidationError):
            await category_service.create("Broken", "broken", hours, actor=ADMIN)

        assert await category_service.list() == []

    @pytest.mark.asyncio
    async def test_name_required(self, category_service):
        with pytest.raises(ValidationError):
            await category_service.create("  ", "nameless", 4, actor=ADMIN)

    @pytest.mark.asyncio
    async def test_requires_manage_settings(self, category_service):
        with pytest.raises(PermissionDeniedError):
            await category_service.create("Billing", "billing", 24, actor=MANAGER)

    @pytest.mark.asyncio
    async def test_records_audit_entry(self, category_service, audit_trail):
        category = await category_service.create("Billing", "billing", 24, actor=ADMIN)

        entries = await audit_trail.for_entity("TicketCategory", category.id)
        assert [(e.action, e.performed_by, e.details) for e in entries] == [
            (AuditAction.CREATE, "Ada Admin", "Created category: Billing")
        ]


class TestUpdateCategory:
    """Test CategoryRegistryService.update"""

    @pytest.mark.asyncio
    async def test_partial_update(self, category_service):
        category = await category_service.create("Billing", "billing", 24, actor=ADMIN)

        updated = await category_service.update(category.id, {"sla_hours": 12}, actor=ADMIN)

        assert updated.sla_hours == 12
        assert updated.name == "Billing"
        assert (await category_service.get(category.id)).sla_hours == 12

    @pytest.mark.asyncio
    async def test_same_code_is_accepted(self, category_service):
        category = await category_service.create("Billing", "billing", 24, actor=ADMIN)
        updated = await category_service.update(category.id, {"code": "billing", "name": "Payments"}, actor=ADMIN)
        assert updated.name == "Payments"

    @pytest.mark.asyncio
    async def test_code_cannot_change(self, category_service):
        category = await category_service.create("Billing", "billing", 24, actor=ADMIN)

        with pytest.raises(ValidationError):
            await category_service.update(category.id, {"code": "payments"}, actor=ADMIN)

        assert (await category_service.get(category.id)).code == "billing"

    @pytest.mark.asyncio
    async def test_invalid_sla_rejected(self, category_service):
        category = await category_service.create("Billing", "billing", 24, actor=ADMIN)

        with pytest.raises(ValidationError):
            await category_service.update(category.id, {"sla_hours": 0}, actor=ADMIN)

    @pytest.mark.asyncio
    async def test_unknown_category(self, category_service):
        with pytest.raises(NotFoundError):
            await category_service.update("0b6f3c1e-6a0b-4a57-9b0e-3d1f6a1c9e21", {"name": "x"}, actor=ADMIN)


class TestListAndDelete:
    """Test listing and deletion"""

    @pytest.mark.asyncio
    async def test_list_ordered_by_name(self, category_service):
        await category_service.create("Other", "other", 24, actor=ADMIN)
        await category_service.create("Billing", "billing", 24, actor=ADMIN)
        await category_service.create("Hardware", "hardware", 48, actor=ADMIN)

        assert [c.name for c in await category_service.list()] == ["Billing", "Hardware", "Other"]

    @pytest.mark.asyncio
    async def test_delete(self, category_service):
        category = await category_service.create("Billing", "billing", 24, actor=ADMIN)

        await category_service.delete(category.id, actor=ADMIN)

        assert await category_service.list() == []
        with pytest.raises(NotFoundError):
            await category_service.get(category.id)

    @pytest.mark.asyncio
    async def test_delete_requires_manage_settings(self, category_service):
        category = await category_service.create("Billing", "billing", 24, actor=ADMIN)

        with pytest.raises(PermissionDeniedError):
            await category_service.delete(category.id, actor=SUPPORT)

    @pytest.mark.asyncio
    async def test_resolve_unknown_code(self, category_service):
        with pytest.raises(NotFoundError):
            await category_service.resolve_code("internet_isue")

    @pytest.mark.asyncio
    async def test_resolve_returns_registered_category(self, category_service):
        created = await category_service.create("Billing", "billing", 24, actor=ADMIN)

        category = await category_service.resolve_code("billing")

        assert category.id == created.id
        assert category.sla_hours == 24

    @pytest.mark.asyncio
    async def test_resolve_malformed_code(self, category_service):
        with pytest.raises(ValidationError):
            await category_service.resolve_code("Internet Issue")


class TestSeedDefaults:
    """Test seeding the starter set"""

    @pytest.mark.asyncio
    async def test_seed_into_empty_registry(self, category_service):
        created = await category_service.seed_defaults()

        assert len(created) == 5
        by_code = {c.code: c.sla_hours for c in await category_service.list()}
        assert by_code == {
            "internet_issue": 4,
            "billing": 24,
            "hardware": 48,
            "installation": 72,
            "other": 24,
        }

    @pytest.mark.asyncio
    async def test_second_seed_inserts_nothing(self, category_service):
        await category_service.seed_defaults()

        assert await category_service.seed_defaults() == []
        assert len(await category_service.list()) == 5

    @pytest.mark.asyncio
    async def test_seed_skipped_when_any_category_exists(self, category_service):
        await category_service.create("Custom", "custom", 8, actor=ADMIN)

        assert await category_service.seed_defaults() == []
        assert [c.code for c in await category_service.list()] == ["custom"]

    @pytest.mark.asyncio
    async def test_seed_with_info_logging(self, category_service, json_logging, caplog):
        created = await category_service.seed_defaults()

        assert len(created) == 5
        record = next(r for r in caplog.records if r.getMessage() == "Category registry seeded")
        assert record.created_count == 5

    @pytest.mark.asyncio
    async def test_seed_requires_manage_settings(self, category_service):
        with pytest.raises(PermissionDeniedError):
            await category_service.seed_defaults(SUPPORT)


class TestYAMLDefaults:
    """Test YAMLCategoryDefaultsProvider"""

    def test_missing_file_uses_builtin_set(self, tmp_path):
        provider = YAMLCategoryDefaultsProvider(tmp_path / "missing.yaml")
        assert tuple(provider.get_defaults()) == DEFAULT_CATEGORIES

    def test_reads_categories(self, tmp_path):
        path = tmp_path / "categories.yaml"
        path.write_text(
            "categories:\n"
            "  - name: Fiber Cut\n"
            "    code: fiber_cut\n"
            "    sla_hours: 6\n"
            "  - name: VIP\n"
            "    code: vip\n"
            "    sla_hours: 2\n"
            "    description: Enterprise accounts\n",
            encoding="utf-8",
        )

        defaults = YAMLCategoryDefaultsProvider(path).get_defaults()

        assert [(d.code, d.sla_hours, d.description) for d in defaults] == [
            ("fiber_cut", 6, ""),
            ("vip", 2, "Enterprise accounts"),
        ]

    def test_reload_picks_up_edits(self, tmp_path):
        path = tmp_path / "categories.yaml"
        provider = YAMLCategoryDefaultsProvider(path)
        path.write_text("categories:\n  - {name: VIP, code: vip, sla_hours: 2}\n", encoding="utf-8")

        provider.reload()

        assert [d.code for d in provider.get_defaults()] == ["vip"]

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "categories.yaml"
        path.write_text("categories:\n  - name: No code\n", encoding="utf-8")

        with pytest.raises(ConfigurationException):
            YAMLCategoryDefaultsProvider(path)

    @pytest.mark.asyncio
    async def test_seed_uses_provider(self, session, clock, tmp_path):
        from ispdesk.categories.application import CategoryRegistryService
        from ispdesk.categories.infrastructure import SQLAlchemyCategoryRepository
        from ispdesk.core import RoleBasedAuthorizer

        path = tmp_path / "categories.yaml"
        path.write_text("categories:\n  - {name: VIP, code: vip, sla_hours: 2}\n", encoding="utf-8")
        service = CategoryRegistryService(
            SQLAlchemyCategoryRepository(session),
            RoleBasedAuthorizer(),
            defaults_provider=YAMLCategoryDefaultsProvider(path),
            clock=clock,
        )

        created = await service.seed_defaults()

        assert [c.code for c in created] == ["vip"]
