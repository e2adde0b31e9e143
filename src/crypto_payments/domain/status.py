"""Payment statuses, triggers and the static transition table.

The table is plain data: nothing here holds per-payment state, and every
lookup is a pure function of its arguments.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType


class PaymentStatus(Enum):
    """Lifecycle status of an on-chain payment."""

    DETECTED = "detected"
    CONFIRMING = "confirming"
    CONFIRMED = "confirmed"
    ORPHANED = "orphaned"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL

    @property
    def is_active(self) -> bool:
        return self not in _TERMINAL

    @property
    def is_successful(self) -> bool:
        return self is PaymentStatus.CONFIRMED

    @property
    def is_failed(self) -> bool:
        return self is PaymentStatus.FAILED

    @property
    def is_temporary(self) -> bool:
        """Orphaned is a recovery state that must be resolved explicitly."""
        return self is PaymentStatus.ORPHANED

    def allowed_targets(self) -> frozenset[PaymentStatus]:
        return TRANSITIONS[self]

    def can_transition_to(self, target: PaymentStatus) -> bool:
        return target in TRANSITIONS[self]


class Trigger(Enum):
    """Labels for the events that move a payment between statuses."""

    INCLUDED = "included"
    CONFIRMED = "confirmed"
    FAILED = "failed"
    ORPHANED = "orphaned"
    BACK_TO_MEMPOOL = "back_to_mempool"
    DROPPED = "dropped"


_TERMINAL = frozenset({PaymentStatus.CONFIRMED, PaymentStatus.FAILED})

TRANSITIONS: MappingProxyType[PaymentStatus, frozenset[PaymentStatus]] = MappingProxyType(
    {
        PaymentStatus.DETECTED: frozenset({PaymentStatus.CONFIRMING, PaymentStatus.FAILED}),
        PaymentStatus.CONFIRMING: frozenset(
            {PaymentStatus.CONFIRMED, PaymentStatus.ORPHANED, PaymentStatus.FAILED}
        ),
        PaymentStatus.ORPHANED: frozenset({PaymentStatus.DETECTED, PaymentStatus.FAILED}),
        PaymentStatus.CONFIRMED: frozenset(),
        PaymentStatus.FAILED: frozenset(),
    }
)

# Each trigger maps source status -> target status. Every pair here must also
# be an edge in TRANSITIONS.
TRIGGER_EDGES: MappingProxyType[Trigger, MappingProxyType[PaymentStatus, PaymentStatus]] = (
    MappingProxyType(
        {
            Trigger.INCLUDED: MappingProxyType(
                {PaymentStatus.DETECTED: PaymentStatus.CONFIRMING}
            ),
            Trigger.CONFIRMED: MappingProxyType(
                {PaymentStatus.CONFIRMING: PaymentStatus.CONFIRMED}
            ),
            Trigger.ORPHANED: MappingProxyType(
                {PaymentStatus.CONFIRMING: PaymentStatus.ORPHANED}
            ),
            Trigger.BACK_TO_MEMPOOL: MappingProxyType(
                {PaymentStatus.ORPHANED: PaymentStatus.DETECTED}
            ),
            Trigger.DROPPED: MappingProxyType({PaymentStatus.ORPHANED: PaymentStatus.FAILED}),
            Trigger.FAILED: MappingProxyType(
                {
                    PaymentStatus.DETECTED: PaymentStatus.FAILED,
                    PaymentStatus.CONFIRMING: PaymentStatus.FAILED,
                    PaymentStatus.ORPHANED: PaymentStatus.FAILED,
                }
            ),
        }
    )
)


def target_for(status: PaymentStatus, trigger: Trigger) -> PaymentStatus | None:
    """Return the status ``trigger`` leads to from ``status``, or None if no edge exists."""
    return TRIGGER_EDGES[trigger].get(status)


def triggers_from(status: PaymentStatus) -> tuple[Trigger, ...]:
    """Triggers with an edge out of ``status``, in declaration order."""
    return tuple(trigger for trigger in Trigger if status in TRIGGER_EDGES[trigger])
