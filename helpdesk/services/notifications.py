from __future__ import annotations

from loguru import logger

from helpdesk.schemas import AppSettings, Notification, NotificationEvent, Ticket


def _is_enabled(event: NotificationEvent, settings: AppSettings) -> bool:
    prefs = settings.notifications
    match event:
        case NotificationEvent.CREATE:
            return prefs.notify_on_creation
        case NotificationEvent.UPDATE:
            return prefs.notify_on_status_change
        case NotificationEvent.ASSIGN:
            return prefs.notify_on_assignment
        case NotificationEvent.CLOSE:
            return prefs.notify_on_resolution
        case _:
            raise ValueError(f"Unsupported notification event: {event}")


def _compose(event: NotificationEvent, ticket: Ticket, assignee_name: str | None) -> str:
    match event:
        case NotificationEvent.CREATE:
            return (
                f"Ticket {ticket.id} logged. An acknowledgment has been sent to {ticket.created_by.email}."
            )
        case NotificationEvent.UPDATE:
            return f"Ticket {ticket.id} marked as {ticket.status.value}. Requester notified."
        case NotificationEvent.ASSIGN:
            assignee = assignee_name or ticket.assigned_to or "unassigned"
            return f"Ticket {ticket.id} assigned to {assignee}. Requester notified."
        case NotificationEvent.CLOSE:
            return f"Ticket {ticket.id} resolved and closed. Requester notified."
    raise ValueError(f"Unsupported notification event: {event}")


class NotificationDispatcher:
    """
    Decide whether a ticket lifecycle event produces a notice.

    Delivery is simulated: an enabled event yields a ``Notification`` for the
    caller to surface and one log line naming the configured relay. Nothing is
    sent over SMTP.
    """

    def notify(
        self,
        event: NotificationEvent,
        ticket: Ticket,
        settings: AppSettings,
        *,
        assignee_name: str | None = None,
    ) -> Notification | None:
        if not _is_enabled(event, settings):
            return None

        relay = settings.email_config
        notification = Notification(
            event=event,
            ticket_id=ticket.id,
            recipient=ticket.created_by.email,
            message=_compose(event, ticket, assignee_name),
            relay_host=relay.smtp_host,
        )
        logger.info(
            "Simulated email event={event} ticket={ticket_id} to={recipient} via {host}:{port} from={sender}",
            event=event.value,
            ticket_id=ticket.id,
            recipient=notification.recipient,
            host=relay.smtp_host,
            port=relay.smtp_port,
            sender=relay.sender_email,
        )
        return notification
