# models/communicationStatus.py
import enum


class CommunicationStatus(enum.Enum):
    draft = 'draft'
    sent = 'sent'
    scheduled = 'scheduled'


STATUS_LABELS = {
    CommunicationStatus.draft: 'Draft',
    CommunicationStatus.sent: 'Sent',
    CommunicationStatus.scheduled: 'Scheduled',
}

# Values a client may set through update; 'sent' is reserved for the send operation
UPDATABLE_STATUSES = (CommunicationStatus.draft.value, CommunicationStatus.scheduled.value)
CREATABLE_STATUSES = tuple(status.value for status in CommunicationStatus)


def status_label(status):
    """Display text for a status member or its raw value."""
    if not isinstance(status, CommunicationStatus):
        status = CommunicationStatus(status)
    return STATUS_LABELS[status]
