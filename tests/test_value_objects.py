"""Unit tests for identifiers and tenant/administrator value objects."""

from __future__ import annotations

import pytest

from praefectus.foundation.domain import (
    AdminId,
    AdminStatus,
    CurrencyCode,
    Email,
    Password,
    PersonName,
    Salutation,
    TenantId,
    TenantName,
    TenantSlug,
    compose_display_name,
)

VALID_UUID = "550E8400-E29B-41D4-A716-446655440000"


@pytest.mark.unit
class TestIdentifiers:
    def test_tenant_id_is_lowercased(self) -> None:
        assert TenantId(VALID_UUID).value == VALID_UUID.lower()

    def test_admin_id_str(self) -> None:
        assert str(AdminId(VALID_UUID)) == VALID_UUID.lower()

    @pytest.mark.parametrize("value", ["", "acme-corp", "550e8400e29b41d4a716446655440000"])
    def test_tenant_id_rejects_non_uuid(self, value: str) -> None:
        with pytest.raises(ValueError, match="Invalid tenant ID format"):
            TenantId(value)

    def test_admin_id_rejects_non_uuid(self) -> None:
        with pytest.raises(ValueError, match="Invalid administrator ID format"):
            AdminId("42")


@pytest.mark.unit
class TestTenantName:
    def test_strips_whitespace(self) -> None:
        assert TenantName("  Acme GmbH ").value == "Acme GmbH"

    def test_rejects_blank(self) -> None:
        with pytest.raises(ValueError, match="cannot be empty"):
            TenantName("   ")

    def test_rejects_too_long(self) -> None:
        with pytest.raises(ValueError, match="too long"):
            TenantName("x" * 256)


@pytest.mark.unit
class TestTenantSlug:
    def test_from_simple_name(self) -> None:
        assert TenantSlug.from_name(TenantName("Acme GmbH")).value == "acme-gmbh"

    def test_transliterates_umlauts(self) -> None:
        slug = TenantSlug.from_name(TenantName("Müller & Söhne GmbH"))
        assert slug.value == "mueller-soehne-gmbh"

    def test_strips_accents(self) -> None:
        assert TenantSlug.from_name(TenantName("Café Crème")).value == "cafe-creme"

    def test_truncates_to_63(self) -> None:
        slug = TenantSlug.from_name(TenantName("a" * 100))
        assert len(slug.value) == 63

    def test_name_without_usable_characters(self) -> None:
        with pytest.raises(ValueError, match="usable slug"):
            TenantSlug.from_name(TenantName("!!!"))

    @pytest.mark.parametrize("value", ["Acme", "acme--corp", "-acme", "acme_corp"])
    def test_rejects_malformed(self, value: str) -> None:
        with pytest.raises(ValueError):
            TenantSlug(value)


@pytest.mark.unit
class TestCurrencyCode:
    def test_normalizes_to_upper(self) -> None:
        assert CurrencyCode(" chf ").value == "CHF"

    def test_rejects_wrong_length(self) -> None:
        with pytest.raises(ValueError, match="expected 3 letters"):
            CurrencyCode("EURO")


@pytest.mark.unit
class TestEmail:
    def test_normalizes(self) -> None:
        assert Email("  Max@Acme.DE ").value == "max@acme.de"

    @pytest.mark.parametrize("value", ["max", "max@acme", "max @acme.de", "@acme.de"])
    def test_rejects_malformed(self, value: str) -> None:
        with pytest.raises(ValueError, match="Invalid email format"):
            Email(value)

    def test_rejects_empty(self) -> None:
        with pytest.raises(ValueError, match="cannot be empty"):
            Email(" ")


@pytest.mark.unit
class TestPersonName:
    def test_strips(self) -> None:
        assert PersonName(" Max ").value == "Max"

    def test_rejects_blank(self) -> None:
        with pytest.raises(ValueError):
            PersonName("")


@pytest.mark.unit
class TestPassword:
    def test_minimum_length(self) -> None:
        with pytest.raises(ValueError, match="at least 6"):
            Password("12345")
        assert Password("123456").value == "123456"

    def test_configurable_minimum(self) -> None:
        with pytest.raises(ValueError, match="at least 10"):
            Password("123456789", min_length=10)

    def test_bcrypt_byte_limit(self) -> None:
        with pytest.raises(ValueError, match="72 bytes"):
            Password("ä" * 37)

    def test_repr_masks_value(self) -> None:
        assert "geheim" not in repr(Password("geheim123"))


@pytest.mark.unit
class TestAdminStatus:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (AdminStatus.CREATED, AdminStatus.PENDING_INVITATION),
            (AdminStatus.PENDING_INVITATION, AdminStatus.ACTIVE),
            (AdminStatus.ACTIVE, AdminStatus.ACTIVE),
        ],
    )
    def test_allowed(self, current: AdminStatus, target: AdminStatus) -> None:
        assert current.can_transition_to(target)

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (AdminStatus.ACTIVE, AdminStatus.CREATED),
            (AdminStatus.PENDING_INVITATION, AdminStatus.CREATED),
            (AdminStatus.CREATED, AdminStatus.ACTIVE),
        ],
    )
    def test_forbidden(self, current: AdminStatus, target: AdminStatus) -> None:
        assert not current.can_transition_to(target)


@pytest.mark.unit
def test_compose_display_name() -> None:
    assert compose_display_name(Salutation.FRAU, " Erika", "Musterfrau ") == (
        "Frau Erika Musterfrau"
    )
