"""Election-Date Change Notifier — who is affected by a state's new dates, and emailing them.

Invariants:
    - Celebration donors take priority: a donor found both ways is emailed once, as a celebration donor
    - Unsubscribed donors (election_updates topic) are filtered before any send
    - Celebration donors are emailed only when the impact assessment says so;
      OCD-only donors are emailed unconditionally
    - Only compliant donors can be impacted; guests are skipped with has_impact=False
    - One donor's failure (impact lookup or send) never aborts the loop
    - Lookup failures before the loop propagate: the caller decides whether to retry the event

Design Decisions:
    - Old limits are evaluated against the old dates, new limits against the new dates
      (pinned through ElectionCycleService.get_effective_limits(election_dates=...))
    - Limits evaluated per candidate; the largest swing is reported (core/impact.py)
    - Collaborators injected as Protocols: donor lookup, unsubscribe filter, email sender
"""

import logging

from compliance_engine.core.domain_types import (
    DonorRecord,
    EffectiveLimits,
    ElectionDates,
    EmailTopic,
    NotificationImpact,
    NotificationSummary,
)
from compliance_engine.core.impact import assess_impact, not_applicable
from compliance_engine.core.limits import is_countable
from compliance_engine.core.repository_protocols import (
    DonorRepository, EmailSender, SubscriptionFilter,
)
from compliance_engine.services.election_cycle import ElectionCycleService

logger = logging.getLogger(__name__)

CHANGED_TEMPLATE = "ElectionDateChanged"
NOTIFICATION_TEMPLATE = "ElectionDateNotification"
IMPACT_ERROR = "Error calculating impact"


def _iso(day) -> str | None:
    return day.isoformat() if day else None


def _date_fields(old_dates: ElectionDates, new_dates: ElectionDates) -> dict:
    return {
        "oldPrimaryDate": _iso(old_dates.primary),
        "newPrimaryDate": _iso(new_dates.primary),
        "oldGeneralDate": _iso(old_dates.general),
        "newGeneralDate": _iso(new_dates.general),
    }


class ElectionDateNotifier:
    """Turns one upstream date-change event into donor emails."""

    def __init__(
        self,
        donors: DonorRepository,
        subscriptions: SubscriptionFilter,
        email: EmailSender,
        limits: ElectionCycleService,
        topic: EmailTopic = EmailTopic.ELECTION_UPDATES,
    ):
        self._donors = donors
        self._subscriptions = subscriptions
        self._email = email
        self._limits = limits
        self._topic = topic

    # ─── Lookups ─────────────────────────────────────────────────

    async def find_donors_with_active_celebrations(self, state: str) -> list[DonorRecord]:
        return await self._donors.find_donors_with_active_celebrations(state)

    async def find_donors_with_ocd_id_in_state(self, state: str) -> list[DonorRecord]:
        return await self._donors.find_donors_with_ocd_id_in_state(state)

    # ─── Impact ──────────────────────────────────────────────────

    async def calculate_election_date_impact(
        self,
        donor: DonorRecord,
        state: str,
        old_dates: ElectionDates,
        new_dates: ElectionDates,
    ) -> NotificationImpact:
        skipped = not_applicable(donor.compliance)
        if skipped is not None:
            return skipped

        try:
            donations = await self._donors.find_active_donations(donor.id)
            pol_ids = sorted({
                d.pol_id for d in donations
                if is_countable(d, self._limits.count_resolved)
            }) or [None]
            old_limits = await self._limits_by_candidate(
                donor, donations, pol_ids, state, old_dates,
            )
            new_limits = await self._limits_by_candidate(
                donor, donations, pol_ids, state, new_dates,
            )
        except Exception as e:
            logger.error(
                f"Error calculating election date impact for donor {donor.id}: {e}",
                exc_info=True,
                extra={"donor_id": donor.id, "state": state},
            )
            return NotificationImpact(has_impact=False, reason=IMPACT_ERROR)

        return assess_impact(old_limits, new_limits, old_dates, new_dates)

    async def _limits_by_candidate(
        self, donor, donations, pol_ids, state, dates,
    ) -> dict[str | None, EffectiveLimits]:
        return {
            pol_id: await self._limits.get_effective_limits(
                donor.compliance, donations, pol_id, state, election_dates=dates,
            )
            for pol_id in pol_ids
        }

    # ─── Dispatch ────────────────────────────────────────────────

    async def notify_donors_with_active_celebrations(
        self,
        donors: list[DonorRecord],
        state: str,
        old_dates: ElectionDates,
        new_dates: ElectionDates,
    ) -> int:
        subscribed = await self._subscriptions.filter_unsubscribed(
            donors, self._topic.value,
        )
        sent = 0
        for donor in subscribed:
            impact = await self.calculate_election_date_impact(
                donor, state, old_dates, new_dates,
            )
            if not impact.has_impact:
                logger.debug(
                    f"No impact for donor {donor.id}, skipping notification",
                    extra={"donor_id": donor.id, "state": state},
                )
                continue

            payload = {
                "state": state,
                "oldLimit": impact.old_limit,
                "newLimit": impact.new_limit,
                "firstName": donor.first_name,
                **_date_fields(old_dates, new_dates),
                "impactDescription": impact.impact_description,
            }
            if await self._send(donor, payload, CHANGED_TEMPLATE, state):
                sent += 1
        return sent

    async def notify_donors_with_ocd_id(
        self,
        donors: list[DonorRecord],
        state: str,
        old_dates: ElectionDates,
        new_dates: ElectionDates,
    ) -> int:
        subscribed = await self._subscriptions.filter_unsubscribed(
            donors, self._topic.value,
        )
        sent = 0
        for donor in subscribed:
            payload = {
                "firstName": donor.first_name,
                "state": state,
                **_date_fields(old_dates, new_dates),
            }
            if await self._send(donor, payload, NOTIFICATION_TEMPLATE, state):
                sent += 1
        return sent

    async def _send(
        self, donor: DonorRecord, payload: dict, template: str, state: str,
    ) -> bool:
        try:
            await self._email.send_email(
                donor.email, payload, template, donor.first_name,
            )
        except Exception as e:
            logger.error(
                f"Failed to send notification to donor {donor.id}: {e}",
                extra={"donor_id": donor.id, "state": state, "template": template},
            )
            return False
        logger.info(
            f"Sent {template} notification to donor {donor.id}",
            extra={"donor_id": donor.id, "state": state, "template": template},
        )
        return True

    # ─── Entry point ─────────────────────────────────────────────

    async def handle_election_date_change(
        self, state: str, old_dates: ElectionDates, new_dates: ElectionDates,
    ) -> NotificationSummary:
        logger.info(
            f"Processing election date change notifications for {state}",
            extra={"state": state},
        )
        try:
            with_celebrations = await self.find_donors_with_active_celebrations(state)
            with_ocd_id = await self.find_donors_with_ocd_id_in_state(state)
            celebration_ids = {d.id for d in with_celebrations}
            ocd_only = [d for d in with_ocd_id if d.id not in celebration_ids]

            celebration_sent = await self.notify_donors_with_active_celebrations(
                with_celebrations, state, old_dates, new_dates,
            )
            ocd_sent = await self.notify_donors_with_ocd_id(
                ocd_only, state, old_dates, new_dates,
            )
        except Exception as e:
            logger.error(
                f"Error handling election date change notifications for {state}: {e}",
                extra={"state": state},
            )
            raise

        summary = NotificationSummary(
            state=state,
            users_with_celebrations=len(with_celebrations),
            users_with_ocd_id_only=len(ocd_only),
            celebration_emails_sent=celebration_sent,
            ocd_id_emails_sent=ocd_sent,
        )
        logger.info(
            f"Election date change notifications completed for {state}: "
            f"{summary.total_emails_sent} email(s) sent",
            extra={"state": state},
        )
        return summary
