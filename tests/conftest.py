"""Pytest configuration and fixtures."""

import random

import pytest
from bgplab.config import Settings
from bgplab.models.bgp_session import EBGPLink, IBGPSession
from bgplab.models.isp import ISPProfile
from bgplab.models.zone import CustomerZone
from bgplab.protocol.types import SessionState
from bgplab.session import LabSession


@pytest.fixture
def lab_settings() -> Settings:
    """Return default settings with a fixed zone seed."""
    return Settings(zone_seed=7, sentry_dsn=None)


@pytest.fixture
def profile_a() -> ISPProfile:
    """Return ISP A's default profile (10.0.0.0/8, AS 65001)."""
    return ISPProfile(
        isp_id="A",
        name="ISP A",
        block="10.0.0.0",
        prefix=8,
        as_number=65001,
        range_label="10.x.x.x",
    )


@pytest.fixture
def profile_b() -> ISPProfile:
    """Return ISP B's default profile (172.16.0.0/12, AS 65002)."""
    return ISPProfile(
        isp_id="B",
        name="ISP B",
        block="172.16.0.0",
        prefix=12,
        as_number=65002,
        range_label="172.16.x.x",
    )


@pytest.fixture
def configured_a() -> IBGPSession:
    """Return a configured iBGP session for AS 65001."""
    session = IBGPSession.for_as("A", 65001)
    return session.model_copy(
        update={"router_id": "1.1.1.1", "state": SessionState.CONFIGURED}
    )


@pytest.fixture
def configured_b() -> IBGPSession:
    """Return a configured iBGP session for AS 65002."""
    session = IBGPSession.for_as("B", 65002)
    return session.model_copy(
        update={"router_id": "2.2.2.2", "state": SessionState.CONFIGURED}
    )


@pytest.fixture
def link_candidate() -> EBGPLink:
    """Return a valid eBGP link candidate from AS 65001 to AS 65002."""
    return EBGPLink(local_as=65001, remote_as=65002, link_address="192.168.1.0")


@pytest.fixture
def zone_a() -> CustomerZone:
    """Return an offline zone owned by ISP A needing 100 hosts."""
    return CustomerZone(zone_id=1, name="Sector 01", required_hosts=100, isp_id="A")


@pytest.fixture
def lab(lab_settings: Settings) -> LabSession:
    """Return a fresh lab session with repeatable zones."""
    return LabSession(lab_settings, rng=random.Random(7))


@pytest.fixture
def ready_lab(lab: LabSession) -> LabSession:
    """Return a lab session with both iBGP sessions and eBGP configured."""
    lab.set_router_id("A", "1.1.1.1")
    lab.set_router_id("B", "2.2.2.2")
    assert lab.configure_ibgp("A").ok
    assert lab.configure_ibgp("B").ok
    lab.set_peering(address="192.168.1.0", prefix=30)
    assert lab.configure_ebgp().ok
    return lab
