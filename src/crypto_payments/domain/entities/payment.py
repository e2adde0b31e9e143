"""Payment aggregate tracking an on-chain transaction to finality.

State machine (see crypto_payments.domain.status):
    detected → confirming (included, requires block info)
    confirming → confirmed (confirmed, requires tiered confirmations)
    confirming → orphaned (orphaned, the including block was reorged out)
    orphaned → detected (back_to_mempool, clears block info and confirmations)
    orphaned → failed (dropped)
    detected, confirming or orphaned → failed (failed)
    confirmed and failed are terminal
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from crypto_payments.domain import transition_engine
from crypto_payments.domain.exceptions import ValidationError
from crypto_payments.domain.policies.confirmation_policy import (
    DEFAULT_CONFIRMATION_POLICY,
    ConfirmationPolicy,
)
from crypto_payments.domain.status import PaymentStatus, Trigger
from crypto_payments.domain.value_objects import (
    BlockInfo,
    ConfirmationCount,
    PaymentAmount,
    PaymentId,
)

if TYPE_CHECKING:
    from datetime import datetime

    from crypto_payments.domain.value_objects import (
        BlockchainNetwork,
        NetworkFee,
        PaymentAddress,
        TransactionHash,
    )


@dataclass(frozen=True, slots=True)
class Payment:
    """Payment aggregate with guarded, table-driven status transitions.

    Payment is immutable (frozen dataclass). Every operation returns a new
    Payment, or ``self`` when the call changes nothing, so a rejected
    operation can never leave a half-applied instance behind. Callers
    persist the returned instance.

    Time is always passed in; the aggregate never reads the clock.

    The required-confirmation threshold is derived on demand from
    ``policy``, the payment amount and the destination network, so
    ``is_confirmed`` is always consistent with the current count.
    """

    id: PaymentId
    amount: PaymentAmount
    to_address: PaymentAddress
    transaction_hash: TransactionHash
    status: PaymentStatus
    confirmations: ConfirmationCount
    detected_at: datetime
    created_at: datetime
    updated_at: datetime
    confirmed_at: datetime | None = None
    from_address: PaymentAddress | None = None
    block_info: BlockInfo | None = None
    network_fee: NetworkFee | None = None
    policy: ConfirmationPolicy = field(default=DEFAULT_CONFIRMATION_POLICY, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.status, PaymentStatus):
            raise ValidationError(f"Invalid payment status: {self.status!r}")
        if isinstance(self.confirmations, int) and not isinstance(self.confirmations, bool):
            object.__setattr__(self, "confirmations", ConfirmationCount(self.confirmations))
        if not isinstance(self.confirmations, ConfirmationCount):
            raise ValidationError(f"Invalid confirmation count: {self.confirmations!r}")

    @classmethod
    def detect(
        cls,
        transaction_hash: TransactionHash,
        amount: PaymentAmount,
        to_address: PaymentAddress,
        now: datetime,
        *,
        payment_id: PaymentId | None = None,
        from_address: PaymentAddress | None = None,
        network_fee: NetworkFee | None = None,
        detected_at: datetime | None = None,
        policy: ConfirmationPolicy = DEFAULT_CONFIRMATION_POLICY,
    ) -> Payment:
        """Create a payment for a transaction seen for the first time.

        Args:
            transaction_hash: Hash of the observed transaction.
            amount: Amount transferred.
            to_address: Receiving address (determines the network).
            now: Current timestamp (UTC).
            payment_id: Identity to use; generated when omitted.
            from_address: Sender address, if known.
            network_fee: Fee paid, if known.
            detected_at: When the watcher saw the transaction; defaults to ``now``.
            policy: Confirmation policy deciding the finality threshold.

        Returns:
            A new Payment in DETECTED status with zero confirmations.
        """
        if amount is None:
            raise ValidationError("Amount cannot be None")
        if to_address is None:
            raise ValidationError("Destination address cannot be None")
        if transaction_hash is None:
            raise ValidationError("Transaction hash cannot be None")

        return cls(
            id=payment_id if payment_id is not None else PaymentId.generate(),
            amount=amount,
            to_address=to_address,
            transaction_hash=transaction_hash,
            status=PaymentStatus.DETECTED,
            confirmations=ConfirmationCount.zero(),
            detected_at=detected_at if detected_at is not None else now,
            created_at=now,
            updated_at=now,
            from_address=from_address,
            network_fee=network_fee,
            policy=policy,
        )

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------

    @property
    def network(self) -> BlockchainNetwork:
        return self.to_address.network

    @property
    def required_confirmations(self) -> int:
        return self.policy.required_confirmations(self.amount, self.network)

    @property
    def is_confirmed(self) -> bool:
        """True once the confirmation count meets the amount-tiered threshold."""
        return self.confirmations.meets(self.required_confirmations)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    def is_in_status(self, status: PaymentStatus) -> bool:
        return self.status is status

    def can_transition_to(self, target: PaymentStatus) -> bool:
        return self.status.can_transition_to(target)

    def can_fire(self, trigger: Trigger) -> bool:
        return transition_engine.can_fire(self, trigger)

    def permitted_triggers(self) -> tuple[Trigger, ...]:
        return transition_engine.permitted_triggers(self.status)

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------

    def fire(self, trigger: Trigger, now: datetime) -> Payment:
        """Apply ``trigger`` through the transition engine.

        Returns:
            New Payment in the target status.

        Raises:
            InvalidTransitionError: No edge for the trigger from the current status.
            MissingBlockInfoError: ``included`` without block info.
            InsufficientConfirmationsError: ``confirmed`` below the threshold.
        """
        target = transition_engine.resolve(self, trigger)

        changes: dict[str, object] = {"status": target, "updated_at": now}
        if trigger is Trigger.BACK_TO_MEMPOOL:
            changes["block_info"] = None
            changes["confirmations"] = ConfirmationCount.zero()
        if target is PaymentStatus.CONFIRMED and self.confirmed_at is None:
            changes["confirmed_at"] = now

        return replace(self, **changes)

    def transition_to_confirming(self, now: datetime) -> Payment:
        return self.fire(Trigger.INCLUDED, now)

    def transition_to_confirmed(self, now: datetime) -> Payment:
        return self.fire(Trigger.CONFIRMED, now)

    def transition_to_orphaned(self, now: datetime) -> Payment:
        return self.fire(Trigger.ORPHANED, now)

    def transition_to_failed(self, now: datetime) -> Payment:
        return self.fire(Trigger.FAILED, now)

    def transition_back_to_detected(self, now: datetime) -> Payment:
        return self.fire(Trigger.BACK_TO_MEMPOOL, now)

    def transition_to_dropped(self, now: datetime) -> Payment:
        return self.fire(Trigger.DROPPED, now)

    # -------------------------------------------------------------------
    # Feed updates
    # -------------------------------------------------------------------

    def update_confirmations(self, count: int, now: datetime) -> Payment:
        """Record a confirmation count reported by the chain watcher.

        The stored count never decreases: a stale or duplicate report keeps
        the higher value already recorded. After recording, a CONFIRMING
        payment that meets its threshold moves to CONFIRMED. Orphaned and
        detected payments only record the count, and terminal payments keep
        it for audit without any status change.

        Args:
            count: Confirmations reported by the feed.
            now: Current timestamp (UTC).

        Returns:
            New Payment, or ``self`` if the report changed nothing.

        Raises:
            InvalidConfirmationCountError: If count is negative.
        """
        reported = ConfirmationCount(count)
        updated = self
        if reported > self.confirmations:
            updated = replace(self, confirmations=reported, updated_at=now)

        if updated.status is PaymentStatus.CONFIRMING and updated.is_confirmed:
            return updated.fire(Trigger.CONFIRMED, now)

        return updated

    def update_block_info(self, number: int, block_hash: str, now: datetime) -> Payment:
        """Record the block that includes the transaction.

        A DETECTED payment moves to CONFIRMING. In any other status the block
        info is only replaced (a reorg moved the transaction into another
        block); orphan recovery stays an explicit decision.

        Returns:
            New Payment, or ``self`` if the same block was already recorded.

        Raises:
            InvalidBlockInfoError: If number is negative or block_hash is empty.
        """
        block_info = BlockInfo(number=number, hash=block_hash)

        if self.status is PaymentStatus.DETECTED:
            return replace(self, block_info=block_info).fire(Trigger.INCLUDED, now)

        if block_info == self.block_info:
            return self
        return replace(self, block_info=block_info, updated_at=now)

    def record_network_fee(self, fee: NetworkFee, now: datetime) -> Payment:
        if fee == self.network_fee:
            return self
        return replace(self, network_fee=fee, updated_at=now)
