"""
Appointment status lifecycle.

Direct status updates are checked against ``ALLOWED_TRANSITIONS``. The named
actions used by patients, doctors and admins each declare their source states
in ``ACTION_TRANSITIONS``; reschedule is the only one that moves backwards.
Cancelled and completed appointments are terminal for both.
"""

import enum
from typing import Dict, FrozenSet

from ..core.exceptions import InvalidTransitionError
from ..models.appointment import AppointmentStatus

PENDING = AppointmentStatus.PENDING
CONFIRMED = AppointmentStatus.CONFIRMED
CANCELLED = AppointmentStatus.CANCELLED
COMPLETED = AppointmentStatus.COMPLETED


ALLOWED_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    PENDING: frozenset({CONFIRMED, CANCELLED}),
    CONFIRMED: frozenset({COMPLETED, CANCELLED}),
    CANCELLED: frozenset(),
    COMPLETED: frozenset(),
}


class AppointmentAction(str, enum.Enum):
    ACCEPT = "accept"
    DECLINE = "decline"
    CANCEL = "cancel"
    COMPLETE = "complete"
    RESCHEDULE = "reschedule"


# action -> (source states, target state)
ACTION_TRANSITIONS = {
    AppointmentAction.ACCEPT: (frozenset({PENDING}), CONFIRMED),
    AppointmentAction.DECLINE: (frozenset({PENDING}), CANCELLED),
    AppointmentAction.CANCEL: (frozenset({PENDING, CONFIRMED}), CANCELLED),
    AppointmentAction.COMPLETE: (frozenset({CONFIRMED}), COMPLETED),
    # Moves the slot and asks the doctor to confirm again; never reopens
    # cancelled or completed appointments
    AppointmentAction.RESCHEDULE: (frozenset({PENDING, CONFIRMED}), PENDING),
}


def is_terminal(status: AppointmentStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


def can_transition(current: AppointmentStatus, target: AppointmentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def check_transition(current: AppointmentStatus, target: AppointmentStatus) -> AppointmentStatus:
    """Return ``target`` if the table allows it, else raise InvalidTransitionError."""
    if not can_transition(current, target):
        raise InvalidTransitionError(current, target)
    return target


def resolve_action(current: AppointmentStatus, action: AppointmentAction) -> AppointmentStatus:
    """Return the status ``action`` leads to from ``current``.

    Raises InvalidTransitionError when the action is not defined for the
    current status.
    """
    sources, target = ACTION_TRANSITIONS[action]
    if current not in sources:
        raise InvalidTransitionError(current, target, action.value)
    return target

