"""Staff assignment, roster search and supervisor access delegation.

Sits on top of the pure draft mutations and adds the policies the UI
needs: duplicate protection, remaining-slot arithmetic, the supervisory
role heuristic and supervisor access tokens.
"""

import logging
import re
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Callable, Iterable
from urllib.parse import quote, urlencode

from django.utils import timezone

from event_setup.conf import app_setting
from event_setup.domain import EventDraft, EventId, Role, StaffRef, SupervisorAccessToken, SupervisorContext, Team
from event_setup.domain import mutations
from event_setup.domain.errors import LookupFailure, ValidationError
from event_setup.stores.interfaces import EventStore, StaffRoster, SupervisorTokenIssuer

logger = logging.getLogger(__name__)

SUPERVISORY_KEYWORDS = ("supervisor", "leader", "captain")


def is_supervisory_role(role_name: str) -> bool:
    """Heuristic: does the role name look like a team-lead position?

    Plain substring match, so "Team Lead" is *not* supervisory while
    "Shift Leader" is.
    """
    name = role_name.lower()
    return any(keyword in name for keyword in SUPERVISORY_KEYWORDS)


def teams_missing_supervisor(draft: EventDraft) -> list[Team]:
    return [
        team for team in draft.teams if not any(is_supervisory_role(r.name) for r in team.roles)
    ]


def remaining_slots(role: Role, shift_id: str | None = None) -> int:
    """Open positions for a role slot, never below zero."""
    return max(0, role.required_for(shift_id) - role.assigned_for(shift_id))


@dataclass(frozen=True)
class ShareLink:
    """Links for handing a supervisor token to its holder."""

    access_url: str
    compose_url: str | None = None
    warning: str | None = None


class StaffingAssigner:
    """Assignment workflow over an EventDraft and the external staff roster."""

    def __init__(
        self,
        roster: StaffRoster,
        token_issuer: SupervisorTokenIssuer,
        event_store: EventStore | None = None,
        clock: Callable[[], datetime] = timezone.now,
        token_ttl: timedelta | None = None,
    ) -> None:
        self._roster = roster
        self._token_issuer = token_issuer
        self._event_store = event_store
        self._clock = clock
        self._token_ttl = token_ttl or timedelta(days=app_setting("SUPERVISOR_TOKEN_TTL_DAYS"))

    def find_assignable_staff(
        self,
        query: str,
        roster: StaffRoster | None = None,
        exclude_ids: Iterable[str] | None = None,
    ) -> list[StaffRef]:
        """Search the roster by name (case-insensitive) or contact number.

        Staff already holding a role stay in the results unless the caller
        passes their ids in exclude_ids; one person may cover several roles.
        """
        source = roster or self._roster
        try:
            candidates = source.search(query)
        except Exception as exc:
            logger.exception("Staff roster search failed for query %r", query)
            raise LookupFailure("Staff search is unavailable right now") from exc

        needle = query.strip().lower()
        excluded = set(exclude_ids or ())
        return [
            staff
            for staff in candidates
            if staff.id not in excluded
            and (not needle or needle in staff.name.lower() or needle in staff.contact_info)
        ]

    @staticmethod
    def committed_staff_ids(draft: EventDraft) -> set[str]:
        return {staff.id for _, role in draft.all_roles() for staff in role.assigned_staff}

    def assign(
        self,
        draft: EventDraft,
        role_id: str,
        staff: StaffRef,
        team_id: str | None = None,
        shift_id: str | None = None,
        allow_duplicates: bool = False,
    ) -> EventDraft:
        role = mutations.find_role(draft, role_id, team_id)
        if not allow_duplicates and any(
            s.id == staff.id and s.shift_id == shift_id for s in role.assigned_staff
        ):
            raise ValidationError(f"{staff.name} is already assigned to {role.name}")
        stamped = replace(staff, role=role.name)
        logger.debug("Assigning staff %s to role %s (shift=%s)", staff.id, role.id, shift_id)
        return mutations.assign_staff(draft, role_id, stamped, shift_id=shift_id, team_id=team_id)

    def unassign(
        self,
        draft: EventDraft,
        role_id: str,
        staff_id: str,
        team_id: str | None = None,
        shift_id: str | None = None,
    ) -> EventDraft:
        return mutations.remove_staff(draft, role_id, staff_id, shift_id=shift_id, team_id=team_id)

    @staticmethod
    def supervisor_candidates(team: Team) -> list[StaffRef]:
        """Staff assigned to the team's supervisory roles, first occurrence wins."""
        seen: dict[str, StaffRef] = {}
        for role in team.roles:
            if not is_supervisory_role(role.name):
                continue
            for staff in role.assigned_staff:
                seen.setdefault(staff.id, staff)
        return list(seen.values())

    def generate_supervisor_token(
        self, event_id: str, team: Team, staff: StaffRef | None
    ) -> SupervisorAccessToken:
        """Issue a fresh access token for a team's supervisor.

        Earlier tokens for the same team stay active; every call issues an
        independent token.
        """
        if staff is None:
            raise ValidationError("Please select a supervisor")
        expires_at = self._clock() + self._token_ttl
        try:
            token = self._token_issuer.create_token(event_id, team.id, staff.id, expires_at)
        except Exception as exc:
            logger.exception("Token issuance failed for team %s", team.id)
            raise LookupFailure("Could not generate an access link") from exc
        logger.info(
            "Issued supervisor token %s for team %s (staff %s), expires %s",
            token.id,
            team.id,
            staff.id,
            token.expires_at.isoformat(),
        )
        return token

    def share_token_link(self, token: SupervisorAccessToken, staff: StaffRef, team: Team) -> ShareLink:
        """Build the supervisor access link and a messaging compose link.

        A supervisor missing from the team roster is reported as a warning;
        the access link is still returned so it can be copied by hand.
        """
        access_url = f"{app_setting('SUPERVISOR_ACCESS_URL')}?{urlencode({'token': token.access_token})}"
        member = next(
            (s for role in team.roles for s in role.assigned_staff if s.id == staff.id),
            None,
        )
        if member is None:
            logger.warning("Supervisor %s is not assigned to team %s", staff.id, team.id)
            return ShareLink(access_url=access_url, warning="Supervisor not found in this team")

        phone = re.sub(r"\D", "", member.contact_info)
        message = (
            f"Hi {member.name}, you have been given supervisor access for {team.name}. "
            f"Use this link to manage your team's attendance: {access_url}"
        )
        compose_url = f"{app_setting('MESSAGING_COMPOSE_URL')}{phone}?text={quote(message)}"
        return ShareLink(access_url=access_url, compose_url=compose_url)

    def validate_supervisor_token(self, access_token: str) -> SupervisorContext:
        if not access_token:
            raise LookupFailure(
                "No access token provided. Please use the link sent to you by the event organizer."
            )
        token = self._token_issuer.find_token(access_token)
        if token is None or not token.is_usable(self._clock()):
            logger.warning("Rejected supervisor token (unknown, inactive or expired)")
            raise LookupFailure("Invalid or expired access token")

        event_name = ""
        if self._event_store is not None:
            stored = self._event_store.get_event(EventId.from_string(token.event_id))
            event_name = stored.draft.name if stored else ""
        supervisor = self._roster.get(token.supervisor_staff_id)
        return SupervisorContext(
            event_id=token.event_id,
            team_id=token.team_id,
            supervisor_staff_id=token.supervisor_staff_id,
            event_name=event_name,
            supervisor_name=supervisor.name if supervisor else "",
        )
