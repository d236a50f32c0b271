"""Notification stage: renders an Analysis and delivers it to Slack.

``build_notification`` is a pure function of the analysis. Delivery goes
to a Slack incoming webhook when one is configured; otherwise the message
is only logged. Delivery failures are reported as ``sent=False`` and never
propagate to the rest of the cycle.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import httpx

from sre_monitor.pipeline.types import (
    Analysis,
    Issue,
    MetricStatus,
    NotificationIntent,
    NotificationResult,
)
from sre_monitor.telemetry import NOTIFICATION_FAILED, NOTIFICATION_SENT, get_logger

if TYPE_CHECKING:
    from sre_monitor.config.settings import AppConfig

log = get_logger(__name__)

ALERTS_CHANNEL = "alerts"
MONITORING_CHANNEL = "monitoring"
DEFAULT_RECIPIENTS = ("sre-team", "oncall")


def _issue_lines(issues: Sequence[Issue]) -> str:
    return "".join(
        f"• {issue.component}: {issue.description}\n"
        f"  Recommendation: {issue.recommendation}\n\n"
        for issue in issues
    )


def build_notification(
    analysis: Analysis, recipients: Sequence[str] = DEFAULT_RECIPIENTS
) -> NotificationIntent:
    """Render an analysis into a channel, message and recipient list.

    CRIT goes to the alerts channel and lists every critical issue; WARN
    lists every warning; OK states that all metrics are in range. The
    message always ends with the next check-in timestamp.
    """
    status = analysis.overall_status
    if status is MetricStatus.CRIT:
        channel = ALERTS_CHANNEL
        message = "🚨 *CRITICAL ALERT* - System health check failed\n"
        message += "*Immediate Action Required*\n\n"
        message += "*Critical Issues:*\n"
        message += _issue_lines(analysis.critical_issues)
    elif status is MetricStatus.WARN:
        channel = MONITORING_CHANNEL
        message = "⚠️ *WARNING* - System health check warnings\n"
        message += "*Monitor closely*\n\n"
        message += "*Warnings:*\n"
        message += _issue_lines(analysis.warnings)
    else:
        channel = MONITORING_CHANNEL
        message = "✅ *System Healthy* - All systems operational\n\n"
        message += "*Status:* All metrics within normal ranges\n\n"

    if analysis.recommendations:
        message += "*Recommendations:*\n"
        message += "".join(f"• {rec}\n" for rec in analysis.recommendations)
        message += "\n"

    message += f"*Next Check-in:* {analysis.next_check_in.isoformat()}"

    return NotificationIntent(
        channel=channel,
        severity_band=status,
        message=message,
        recipients=tuple(recipients),
    )


class Notifier:
    """Delivers notifications for analyses.

    Args:
        webhook_url: Slack incoming webhook. None means log-only delivery.
        recipients: Recipients attached to every notification.
        client: Optional shared ``httpx.AsyncClient``.
        timeout_seconds: Webhook request timeout.
    """

    def __init__(
        self,
        webhook_url: str | None = None,
        recipients: Sequence[str] = DEFAULT_RECIPIENTS,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.webhook_url = webhook_url
        self.recipients = tuple(recipients)
        self._client = client
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(
        cls, config: "AppConfig", client: httpx.AsyncClient | None = None
    ) -> "Notifier":
        return cls(
            webhook_url=config.slack_webhook_url,
            recipients=config.notification_recipients,
            client=client,
            timeout_seconds=config.notification_timeout_seconds,
        )

    async def send(self, analysis: Analysis) -> NotificationResult:
        """Render and deliver a notification; never raises."""
        timestamp = datetime.now(timezone.utc)
        try:
            intent = build_notification(analysis, self.recipients)
            if self.webhook_url:
                await self._post(intent)
        except Exception as e:
            log.error(
                NOTIFICATION_FAILED,
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            return NotificationResult(
                sent=False,
                channel="unknown",
                message="Failed to send notification",
                timestamp=timestamp,
                error=str(e),
            )

        log.info(
            NOTIFICATION_SENT,
            channel=intent.channel,
            severity_band=intent.severity_band.value,
            message_length=len(intent.message),
            delivered_via="slack" if self.webhook_url else "log",
        )
        return NotificationResult(
            sent=True,
            channel=intent.channel,
            message=intent.message,
            timestamp=timestamp,
            recipients=intent.recipients,
        )

    async def _post(self, intent: NotificationIntent) -> None:
        payload = {"channel": f"#{intent.channel}", "text": intent.message}
        if self._client is not None:
            response = await self._client.post(
                self.webhook_url, json=payload, timeout=self.timeout_seconds
            )
            response.raise_for_status()
            return

        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            response = await client.post(self.webhook_url, json=payload)
            response.raise_for_status()
