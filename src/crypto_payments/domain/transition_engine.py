"""Guarded evaluation of payment triggers.

The engine works on two pieces of static data: the trigger edges from
``crypto_payments.domain.status`` and the guard predicates below. It never
mutates anything; ``resolve()`` either returns the target status or raises,
so a rejected trigger can never leave a payment half-updated.

Guards:
    included  -> block info must be present
    confirmed -> confirmations >= amount-tiered threshold
"""

from __future__ import annotations

from collections.abc import Callable
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol

from crypto_payments.domain.exceptions import (
    InsufficientConfirmationsError,
    InvalidTransitionError,
    MissingBlockInfoError,
)
from crypto_payments.domain.status import (
    PaymentStatus,
    Trigger,
    target_for,
    triggers_from,
)

if TYPE_CHECKING:
    from crypto_payments.domain.value_objects import BlockInfo, ConfirmationCount


class TransitionSubject(Protocol):
    """What the engine needs to know about a payment."""

    @property
    def status(self) -> PaymentStatus: ...

    @property
    def block_info(self) -> BlockInfo | None: ...

    @property
    def confirmations(self) -> ConfirmationCount: ...

    @property
    def required_confirmations(self) -> int: ...


Guard = Callable[[TransitionSubject, Trigger], None]


def _require_block_info(subject: TransitionSubject, trigger: Trigger) -> None:
    if subject.block_info is None:
        raise MissingBlockInfoError(
            f"Cannot fire {trigger.value} from {subject.status.value}: "
            "block info is required for inclusion",
            current_status=subject.status,
            trigger=trigger,
        )


def _require_confirmations(subject: TransitionSubject, trigger: Trigger) -> None:
    required = subject.required_confirmations
    if not subject.confirmations.meets(required):
        raise InsufficientConfirmationsError(
            f"Cannot fire {trigger.value}: {subject.confirmations.value} of "
            f"{required} required confirmations",
            current_status=subject.status,
            trigger=trigger,
            confirmations=subject.confirmations.value,
            required=required,
        )


GUARDS: MappingProxyType[Trigger, tuple[Guard, ...]] = MappingProxyType(
    {
        Trigger.INCLUDED: (_require_block_info,),
        Trigger.CONFIRMED: (_require_confirmations,),
    }
)


def resolve(subject: TransitionSubject, trigger: Trigger) -> PaymentStatus:
    """Return the status ``trigger`` moves ``subject`` to.

    Raises:
        InvalidTransitionError: No edge for ``trigger`` from the current status
            (always the case for terminal statuses).
        MissingBlockInfoError: ``included`` fired without block info.
        InsufficientConfirmationsError: ``confirmed`` fired below the threshold.
    """
    current = subject.status
    target = target_for(current, trigger)
    if target is None:
        if current.is_terminal:
            message = f"Payment in terminal status {current.value} rejects {trigger.value}"
        else:
            message = f"Invalid transition: {trigger.value} from status {current.value}"
        raise InvalidTransitionError(message, current_status=current, trigger=trigger)

    for guard in GUARDS.get(trigger, ()):
        guard(subject, trigger)

    return target


def can_fire(subject: TransitionSubject, trigger: Trigger) -> bool:
    """True if ``trigger`` has an edge from the current status and its guards pass."""
    try:
        resolve(subject, trigger)
    except (InvalidTransitionError, InsufficientConfirmationsError):
        return False
    return True


def permitted_triggers(status: PaymentStatus) -> tuple[Trigger, ...]:
    """Triggers with an edge out of ``status``; guards are not evaluated."""
    return triggers_from(status)


def to_dot() -> str:
    """Render the trigger edges as a Graphviz DOT digraph."""
    lines = ["digraph payment_status {", "  rankdir=LR;"]
    for status in PaymentStatus:
        shape = "doublecircle" if status.is_terminal else "circle"
        lines.append(f'  "{status.value}" [shape={shape}];')
    for status in PaymentStatus:
        for trigger in triggers_from(status):
            target = target_for(status, trigger)
            lines.append(f'  "{status.value}" -> "{target.value}" [label="{trigger.value}"];')
    lines.append("}")
    return "\n".join(lines)
