"""Unit tests for eBGP peering validation."""

import pytest
from bgplab.models.bgp_session import EBGPLink, IBGPSession
from bgplab.protocol.ebgp import change_peering, establish_ebgp
from bgplab.protocol.types import ErrorCode, ErrorKind, Outcome, SessionState

PEERING_BLOCK = "192.168.0.0"
PEERING_PREFIX = 16
RANGE_MESSAGE = "eBGP link must be a /30 subnet from the 192.168.0.0/16 private range."


def _establish(
    local: IBGPSession, remote: IBGPSession, link: EBGPLink
) -> Outcome[EBGPLink]:
    return establish_ebgp(local, remote, link, PEERING_BLOCK, PEERING_PREFIX)


class TestEstablishEBGP:
    """Test establish_ebgp validation order and results."""

    def test_establish_success(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
    ) -> None:
        """Test 192.168.1.0/30 towards AS 65002 configures the link."""
        outcome = _establish(configured_a, configured_b, link_candidate)

        assert outcome.ok
        assert outcome.entity.state is SessionState.CONFIGURED
        assert outcome.entity.subnet is not None
        assert outcome.entity.subnet.network_address == "192.168.1.0"
        assert outcome.entity.subnet.usable_hosts == 2
        assert outcome.message == (
            "eBGP Peering established between AS 65001 and Remote AS 65002. "
            "Routes exchanged."
        )

    def test_host_address_inside_slash_30_accepted(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
    ) -> None:
        """Test a host address of the /30 is accepted and normalized."""
        link = link_candidate.model_copy(update={"link_address": "192.168.7.6"})
        outcome = _establish(configured_a, configured_b, link)

        assert outcome.ok
        assert outcome.entity.subnet is not None
        assert outcome.entity.subnet.network_address == "192.168.7.4"

    @pytest.mark.parametrize(
        ("local_state", "remote_state"),
        [
            (SessionState.PENDING, SessionState.CONFIGURED),
            (SessionState.CONFIGURED, SessionState.ERROR),
            (SessionState.PENDING, SessionState.PENDING),
        ],
    )
    def test_requires_both_ibgp_sessions(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
        local_state: SessionState,
        remote_state: SessionState,
    ) -> None:
        """Test eBGP is refused until both iBGP sessions are up."""
        local = configured_a.model_copy(update={"state": local_state})
        remote = configured_b.model_copy(update={"state": remote_state})
        outcome = _establish(local, remote, link_candidate)

        assert outcome.error is not None
        assert outcome.error.code is ErrorCode.IBGP_NOT_READY
        assert outcome.error.kind is ErrorKind.READINESS
        assert outcome.entity.state is SessionState.ERROR
        assert outcome.message == (
            "iBGP must be established in both Autonomous Systems before eBGP peering."
        )

    def test_readiness_checked_first(
        self, configured_a: IBGPSession, configured_b: IBGPSession
    ) -> None:
        """Test readiness wins over a bad address."""
        local = configured_a.model_copy(update={"state": SessionState.PENDING})
        link = EBGPLink(remote_as=65002, link_address="garbage")
        outcome = _establish(local, configured_b, link)

        assert outcome.error is not None
        assert outcome.error.code is ErrorCode.IBGP_NOT_READY

    @pytest.mark.parametrize("address", ["", "192.168.1", "link", "192.168.1.0/30"])
    def test_rejects_bad_format(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
        address: str,
    ) -> None:
        """Test non dotted-quad link addresses."""
        link = link_candidate.model_copy(update={"link_address": address})
        outcome = _establish(configured_a, configured_b, link)

        assert outcome.error is not None
        assert outcome.error.code is ErrorCode.INVALID_FORMAT
        assert outcome.message == "Invalid IP Format for Link."

    @pytest.mark.parametrize("prefix", [29, 24, 31, 16])
    def test_rejects_wrong_prefix(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
        prefix: int,
    ) -> None:
        """Test anything but /30 is refused even for a valid address."""
        link = link_candidate.model_copy(update={"link_prefix": prefix})
        outcome = _establish(configured_a, configured_b, link)

        assert outcome.error is not None
        assert outcome.error.code is ErrorCode.OUT_OF_RESERVED_RANGE
        assert outcome.error.kind is ErrorKind.CONTAINMENT
        assert outcome.message == RANGE_MESSAGE

    @pytest.mark.parametrize("address", ["10.0.0.0", "192.169.0.0", "172.16.0.0", "300.168.1.0"])
    def test_rejects_outside_peering_block(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
        address: str,
    ) -> None:
        """Test addresses outside 192.168.0.0/16 or unparsable."""
        link = link_candidate.model_copy(update={"link_address": address})
        outcome = _establish(configured_a, configured_b, link)

        assert outcome.error is not None
        assert outcome.error.code is ErrorCode.OUT_OF_RESERVED_RANGE

    @pytest.mark.parametrize("remote_as", [65003, 64512, None])
    def test_rejects_remote_as_mismatch(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
        remote_as: int | None,
    ) -> None:
        """Test the remote AS must be ISP B's AS."""
        link = link_candidate.model_copy(update={"remote_as": remote_as})
        outcome = _establish(configured_a, configured_b, link)

        assert outcome.error is not None
        assert outcome.error.code is ErrorCode.REMOTE_AS_MISMATCH
        assert outcome.error.kind is ErrorKind.MISMATCH
        assert outcome.message == "Invalid Remote AS. ISP A must peer with Remote AS 65002."

    def test_mismatch_message_uses_local_name(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
    ) -> None:
        """Test the local ISP name is configurable."""
        link = link_candidate.model_copy(update={"remote_as": 1})
        outcome = establish_ebgp(
            configured_a,
            configured_b,
            link,
            PEERING_BLOCK,
            PEERING_PREFIX,
            local_name="Core Net",
        )

        assert outcome.message == "Invalid Remote AS. Core Net must peer with Remote AS 65002."

    def test_rejects_self_peering(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
    ) -> None:
        """Test both ASes sharing a number cannot peer over eBGP."""
        remote = configured_b.model_copy(update={"as_number": 65001})
        link = link_candidate.model_copy(update={"remote_as": 65001})
        outcome = _establish(configured_a, remote, link)

        assert outcome.error is not None
        assert outcome.error.code is ErrorCode.SELF_PEERING_FORBIDDEN
        assert outcome.error.kind is ErrorKind.SELF_REFERENCE
        assert outcome.message == (
            "Error: Cannot use Local AS (65001) as Remote AS in eBGP peering."
        )

    def test_failure_keeps_prior_subnet(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
    ) -> None:
        """Test a failed re-attempt keeps the previously computed subnet."""
        configured = _establish(configured_a, configured_b, link_candidate).entity
        retry = configured.model_copy(update={"link_prefix": 29})
        outcome = _establish(configured_a, configured_b, retry)

        assert outcome.entity.state is SessionState.ERROR
        assert outcome.entity.subnet == configured.subnet


class TestChangePeering:
    """Test change_peering edit transitions."""

    def _configured(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
    ) -> EBGPLink:
        outcome = _establish(configured_a, configured_b, link_candidate)
        assert outcome.ok
        return outcome.entity

    def test_address_edit_returns_to_pending(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
    ) -> None:
        """Test editing the address drops the configured state and subnet."""
        link = self._configured(configured_a, configured_b, link_candidate)

        edited = change_peering(link, address="192.168.2.0")

        assert edited.state is SessionState.PENDING
        assert edited.message == "Ready to configure..."
        assert edited.link_address == "192.168.2.0"
        assert edited.subnet is None
        assert not edited.is_configured

    @pytest.mark.parametrize(
        "edit",
        [{"prefix": 24}, {"remote_as": "65010"}, {"address": "10.0.0.0", "prefix": 24}],
    )
    def test_any_edit_returns_to_pending(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
        edit: dict[str, object],
    ) -> None:
        """Test prefix and remote AS edits also reset the link."""
        link = self._configured(configured_a, configured_b, link_candidate)

        edited = change_peering(link, **edit)  # type: ignore[arg-type]

        assert edited.state is SessionState.PENDING
        assert edited.subnet is None

    def test_remote_as_parsed(self, link_candidate: EBGPLink) -> None:
        """Test the remote AS is parsed and unparsable text clears it."""
        assert change_peering(link_candidate, remote_as="70000").remote_as == 70000
        assert change_peering(link_candidate, remote_as="abc").remote_as is None

    def test_no_edit_keeps_link(
        self,
        configured_a: IBGPSession,
        configured_b: IBGPSession,
        link_candidate: EBGPLink,
    ) -> None:
        """Test a call without changes leaves the link configured."""
        link = self._configured(configured_a, configured_b, link_candidate)

        assert change_peering(link) == link
