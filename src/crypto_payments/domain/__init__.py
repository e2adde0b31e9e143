"""Domain layer - Core business logic, entities, and rules.

This layer contains:
- Entities: the Payment aggregate
- Value Objects: ConfirmationCount, BlockInfo, NetworkFee, PaymentAmount, ...
- Status & Transition Engine: the static transition table and its guards
- Policies: amount-tiered confirmation requirements
- Domain Events and Exceptions

The domain layer has NO dependencies on external frameworks or infrastructure.
"""
