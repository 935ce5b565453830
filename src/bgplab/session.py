"""Lab session: the explicit context that owns all simulator state."""

import random
import threading

from bgplab.config import Settings, settings as default_settings
from bgplab.models.bgp_session import EBGPLink, IBGPSession
from bgplab.models.isp import ISPId, ISPProfile
from bgplab.models.zone import CustomerZone
from bgplab.monitoring.logger import get_logger
from bgplab.monitoring.sentry_helper import log_validation_outcome
from bgplab.monitoring.stats import StatisticsCollector
from bgplab.protocol.ebgp import change_peering, establish_ebgp
from bgplab.protocol.ibgp import (
    change_as_number,
    change_local_preference,
    change_router_id,
    establish_ibgp,
)
from bgplab.protocol.types import Outcome
from bgplab.protocol.zones import allocate_zone, generate_zones, is_bgp_ready

logger = get_logger(__name__)


class LabSession:
    """
    State of one simulator run.

    Validators are pure; this class feeds them the current records and
    stores what they return. The two iBGP sessions, the eBGP link and the
    zone table each have their own lock. Zone allocations validate against
    a snapshot of the BGP records and only write their own zone.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize a lab session with default ISP profiles.

        Args:
            settings: Engine settings (defaults to the global settings)
            rng: Random source for zone host requirements
        """
        self.settings = settings or default_settings
        self._rng = rng
        self.stats = StatisticsCollector()

        self._session_locks: dict[ISPId, threading.Lock] = {
            "A": threading.Lock(),
            "B": threading.Lock(),
        }
        self._link_lock = threading.Lock()
        self._zones_lock = threading.Lock()
        self._stats_lock = threading.Lock()

        self.reset()

    def reset(self) -> None:
        """Restore default profiles, pending sessions and offline zones."""
        cfg = self.settings
        self.profiles: dict[ISPId, ISPProfile] = {
            "A": ISPProfile(
                isp_id="A",
                name=cfg.isp_a_name,
                block=cfg.isp_a_block,
                prefix=cfg.isp_a_prefix,
                as_number=cfg.isp_a_as_number,
                range_label=cfg.isp_a_range_label,
            ),
            "B": ISPProfile(
                isp_id="B",
                name=cfg.isp_b_name,
                block=cfg.isp_b_block,
                prefix=cfg.isp_b_prefix,
                as_number=cfg.isp_b_as_number,
                range_label=cfg.isp_b_range_label,
            ),
        }
        self.sessions: dict[ISPId, IBGPSession] = {
            isp_id: IBGPSession.for_as(
                isp_id, profile.as_number, cfg.default_local_preference
            )
            for isp_id, profile in self.profiles.items()
        }
        self.link = EBGPLink(
            local_as=cfg.isp_a_as_number,
            remote_as=cfg.isp_b_as_number,
            link_prefix=cfg.peering_link_prefix,
        )

        rng = self._rng
        if rng is None and cfg.zone_seed is not None:
            rng = random.Random(cfg.zone_seed)
        self.zones: dict[int, CustomerZone] = {
            zone.zone_id: zone for zone in generate_zones(cfg.zone_count, rng)
        }
        self.stats.reset()

        logger.info(
            "lab_session_reset",
            isp_a_as=cfg.isp_a_as_number,
            isp_b_as=cfg.isp_b_as_number,
            zones=len(self.zones),
        )

    @staticmethod
    def _check_isp(isp_id: str) -> ISPId:
        if isp_id not in ("A", "B"):
            raise ValueError(f"Unknown ISP: {isp_id!r} (valid: 'A', 'B')")
        return isp_id  # type: ignore[return-value]

    # iBGP

    def set_as_number(self, isp_id: str, value: object) -> IBGPSession:
        """
        Change an ISP's AS number; its iBGP session returns to PENDING.

        Changing ISP B's AS re-targets the peering link's remote AS.

        Args:
            isp_id: "A" or "B"
            value: New AS number as entered

        Returns:
            Updated iBGP session
        """
        isp_id = self._check_isp(isp_id)
        with self._session_locks[isp_id]:
            session = change_as_number(self.sessions[isp_id], value)
            self.sessions[isp_id] = session
            self.profiles[isp_id] = self.profiles[isp_id].model_copy(
                update={"as_number": session.as_number}
            )

        with self._link_lock:
            key = "remote_as" if isp_id == "B" else "local_as"
            self.link = self.link.model_copy(update={key: session.as_number})

        logger.info(
            "as_number_changed",
            isp=isp_id,
            as_number=session.as_number,
            as_class=session.as_class.value,
        )
        return session

    def set_router_id(self, isp_id: str, router_id: str) -> IBGPSession:
        """Change an ISP's router ID; its iBGP session returns to PENDING."""
        isp_id = self._check_isp(isp_id)
        with self._session_locks[isp_id]:
            session = change_router_id(self.sessions[isp_id], router_id)
            self.sessions[isp_id] = session
        return session

    def set_local_preference(self, isp_id: str, value: object) -> IBGPSession:
        """Change an ISP's LOCAL_PREF; a configured session stays configured."""
        isp_id = self._check_isp(isp_id)
        with self._session_locks[isp_id]:
            session = change_local_preference(
                self.sessions[isp_id], value, self.settings.default_local_preference
            )
            self.sessions[isp_id] = session
        logger.info(
            "local_preference_changed",
            isp=isp_id,
            local_preference=session.local_preference,
            state=session.state.value,
        )
        return session

    def configure_ibgp(self, isp_id: str) -> Outcome[IBGPSession]:
        """
        Validate and establish an ISP's iBGP session.

        Args:
            isp_id: "A" or "B"

        Returns:
            Validator outcome
        """
        isp_id = self._check_isp(isp_id)
        with self._session_locks[isp_id]:
            outcome = establish_ibgp(self.sessions[isp_id], self.profiles[isp_id])
            self.sessions[isp_id] = outcome.entity

        self._record("ibgp", outcome, isp=isp_id)
        return outcome

    # eBGP

    def set_peering(
        self,
        address: str | None = None,
        prefix: int | None = None,
        remote_as: object = None,
    ) -> EBGPLink:
        """
        Edit the peering link candidate; any change returns it to PENDING.

        Args:
            address: Link subnet address
            prefix: Link prefix length
            remote_as: Remote AS as entered

        Returns:
            Updated link
        """
        with self._link_lock:
            self.link = change_peering(self.link, address, prefix, remote_as)
            return self.link

    def configure_ebgp(self) -> Outcome[EBGPLink]:
        """Validate and establish the eBGP link from ISP A to ISP B."""
        local, remote = self._session_snapshot()
        cfg = self.settings
        with self._link_lock:
            outcome = establish_ebgp(
                local,
                remote,
                self.link,
                peering_block=cfg.peering_block,
                peering_prefix=cfg.peering_block_prefix,
                link_prefix=cfg.peering_link_prefix,
                local_name=self.profiles["A"].name,
            )
            self.link = outcome.entity

        self._record("ebgp", outcome, link=outcome.entity.link_address)
        return outcome

    # Zones

    @property
    def bgp_ready(self) -> bool:
        """Whether both iBGP sessions and the eBGP link are configured."""
        local, remote = self._session_snapshot()
        with self._link_lock:
            link = self.link
        return is_bgp_ready(local, remote, link)

    def zone(self, zone_id: int) -> CustomerZone:
        """
        Look up a zone.

        Raises:
            KeyError: If the zone does not exist
        """
        with self._zones_lock:
            return self.zones[zone_id]

    def allocate_zone(self, zone_id: int, address: str, prefix: int) -> Outcome[CustomerZone]:
        """
        Validate and assign a subnet to a customer zone.

        Args:
            zone_id: Zone number
            address: Requested network address
            prefix: Requested prefix length

        Returns:
            Validator outcome

        Raises:
            KeyError: If the zone does not exist
        """
        zone = self.zone(zone_id)
        ready = self.bgp_ready
        owner = zone.isp_id
        with self._session_locks[owner]:
            local_preference = self.sessions[owner].local_preference
            source = self.profiles[owner]

        outcome = allocate_zone(
            zone,
            address,
            prefix,
            source=source,
            bgp_ready=ready,
            local_preference=local_preference,
            host_preview_limit=self.settings.host_preview_limit,
        )
        with self._zones_lock:
            self.zones[zone_id] = outcome.entity

        self._record("zone", outcome, zone_id=zone_id, isp=owner)
        return outcome

    def _session_snapshot(self) -> tuple[IBGPSession, IBGPSession]:
        with self._session_locks["A"]:
            local = self.sessions["A"]
        with self._session_locks["B"]:
            remote = self.sessions["B"]
        return local, remote

    def _record(self, validator: str, outcome: Outcome[object], **context: object) -> None:
        with self._stats_lock:
            self.stats.record(validator, outcome.error.code if outcome.error else None)
        log_validation_outcome(validator, outcome, **context)
