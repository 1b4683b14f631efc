from datetime import timedelta

import pytest

from ats_crawler.exceptions import StoreUnavailable
from ats_crawler.schema import AtsType
from ats_crawler.storage import Database
from ats_crawler.vendors import CORE_HOSTS
from tests.conftest import T0


# ── register ─────────────────────────────────────────────────────────────────

def test_register_new_host(registry):
    host = registry.register("acme.wd5.myworkdayjobs.com", AtsType.workday, discovered_at=T0)
    assert host.domain == "acme.wd5.myworkdayjobs.com"
    assert host.ats_type is AtsType.workday
    assert host.company == "acme"
    assert host.is_active is True
    assert host.discovered_at == T0


def test_register_lowercases_domain(registry):
    host = registry.register("  ACME.icims.com ", AtsType.icims)
    assert host.domain == "acme.icims.com"
    assert registry.get("Acme.icims.com") == host


def test_register_twice_keeps_one_row(registry):
    registry.register("acme.icims.com", AtsType.icims)
    registry.register("acme.icims.com", AtsType.icims)
    assert len(registry.all_hosts()) == 1


def test_conflict_updates_vendor_and_keeps_discovered_at_and_company(registry):
    first = registry.register("careers.acme.com", AtsType.icims, company="Acme", discovered_at=T0)
    second = registry.register(
        "careers.acme.com", AtsType.workday, company="Other", discovered_at=T0 + timedelta(days=3)
    )
    assert second.id == first.id
    assert second.ats_type is AtsType.workday
    assert second.company == "Acme"
    assert second.discovered_at == T0


def test_conflict_reactivates_host(registry):
    registry.register("acme.icims.com", AtsType.icims)
    assert registry.deactivate("acme.icims.com")
    assert registry.get("acme.icims.com").is_active is False

    registry.register("acme.icims.com", AtsType.icims)
    assert registry.get("acme.icims.com").is_active is True


# ── queries ──────────────────────────────────────────────────────────────────

def test_deactivate_unknown_host_returns_false(registry):
    assert registry.deactivate("nowhere.example.com") is False


def test_active_hosts_in_insertion_order_without_inactive(registry):
    registry.register("b.icims.com", AtsType.icims)
    registry.register("a.icims.com", AtsType.icims)
    registry.register("c.icims.com", AtsType.icims)
    registry.deactivate("a.icims.com")
    assert [h.domain for h in registry.active_hosts()] == ["b.icims.com", "c.icims.com"]


def test_get_missing_returns_none(registry):
    assert registry.get("missing.example.com") is None


def test_seed_core_hosts_is_repeatable(registry):
    assert registry.seed_core_hosts() == len(CORE_HOSTS)
    assert registry.seed_core_hosts() == len(CORE_HOSTS)
    domains = {h.domain for h in registry.all_hosts()}
    assert domains == {core.domain for core in CORE_HOSTS}
    assert registry.get("boards.greenhouse.io").ats_type is AtsType.greenhouse


def test_summary_groups_by_vendor(registry):
    registry.register("a.icims.com", AtsType.icims)
    registry.register("b.icims.com", AtsType.icims)
    registry.register("acme.wd1.myworkdayjobs.com", AtsType.workday)
    registry.deactivate("b.icims.com")
    assert registry.summary() == {
        "Workday": {"active": 1, "inactive": 0},
        "iCIMS": {"active": 1, "inactive": 1},
    }


# ── Database ─────────────────────────────────────────────────────────────────

def test_unopenable_store_raises_store_unavailable(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    with pytest.raises(StoreUnavailable):
        Database(blocker / "ats.db").open()


def test_connection_requires_open(tmp_path):
    with pytest.raises(RuntimeError):
        Database(tmp_path / "ats.db").connection
