"""Settlement tracker for credit sales."""

import logging
from decimal import Decimal
from typing import Optional, Union

from tillbook.database.base import Database
from tillbook.domain.entities import Payment, PaymentMethod, PaymentStatus
from tillbook.domain.errors import (
    InvalidStateError,
    NotFoundError,
    ValidationError,
    payment_requires_credit_sale,
)
from tillbook.domain.ledger import coerce_payment_method
from tillbook.utils.money import ZERO, MoneyLike, sum_money, to_money

logger = logging.getLogger(__name__)


def derive_payment_status(
    final_amount: Decimal, total_paid: Decimal, current: PaymentStatus
) -> PaymentStatus:
    """Status of a credit sale as a function of its payment total.

    paid once the payments cover the final amount, partial while something
    but not everything is paid, otherwise unchanged. A paid transaction
    stays paid.
    """
    if current == PaymentStatus.PAID or total_paid >= final_amount:
        return PaymentStatus.PAID
    if total_paid > ZERO:
        return PaymentStatus.PARTIAL
    return current


class SettlementTracker:
    """Records payments against credit sales and derives customer debt."""

    def __init__(self, db: Database):
        """Initialize settlement tracker.

        Args:
            db: Database instance
        """
        self.db = db

    def record_payment(
        self,
        transaction_id: int,
        customer_id: int,
        amount: MoneyLike,
        payment_method: Union[PaymentMethod, str],
        notes: Optional[str] = None,
    ) -> Payment:
        """Record a payment against a credit sale.

        The transaction's status is recomputed from its full payment history
        inside the same unit of work, so racing payments converge on the
        status implied by the final payment total. Overpayment is accepted and
        simply settles the transaction.

        Args:
            transaction_id: Credit sale being paid
            customer_id: Paying customer
            amount: Payment amount, greater than zero
            payment_method: cash, qris or bank_transfer
            notes: Optional notes

        Returns:
            The recorded payment

        Raises:
            NotFoundError: If the transaction or customer does not exist
            InvalidStateError: If the transaction is not a credit sale
            ValidationError: If the amount is not positive, the method is
                debt, or the customer does not own the transaction
            StorageError: If the store fails
        """
        payment_amount = to_money(amount, "amount")
        method = coerce_payment_method(payment_method)

        with self.db.unit_of_work() as uow:
            transaction = uow.get_transaction(transaction_id, for_update=True)
            if transaction is None:
                raise NotFoundError("Transaction", transaction_id)
            if transaction.payment_method != PaymentMethod.DEBT:
                raise InvalidStateError(
                    payment_requires_credit_sale(transaction_id, transaction.payment_method.value),
                    transaction_id=transaction_id,
                    payment_method=transaction.payment_method.value,
                )
            if payment_amount <= ZERO:
                raise ValidationError(f"Payment amount must be greater than zero (got {payment_amount})")
            if method == PaymentMethod.DEBT:
                raise ValidationError("A payment cannot itself be made on credit")

            if uow.get_customer(customer_id) is None:
                raise NotFoundError("Customer", customer_id)
            if transaction.customer_id is not None and transaction.customer_id != customer_id:
                raise ValidationError(
                    f"Transaction {transaction_id} belongs to customer {transaction.customer_id}, "
                    f"not customer {customer_id}"
                )

            payment = uow.add_payment(
                transaction_id=transaction_id,
                customer_id=customer_id,
                amount=payment_amount,
                payment_method=method,
                notes=notes,
            )

            total_paid = sum_money(uow.list_payment_amounts(transaction_id))
            status = derive_payment_status(transaction.final_amount, total_paid, transaction.payment_status)
            if status != transaction.payment_status:
                uow.set_payment_status(transaction_id, status)

        logger.info(
            "Recorded payment %d of %s on transaction %d (paid %s of %s, %s -> %s)",
            payment.id,
            payment.amount,
            transaction_id,
            total_paid,
            transaction.final_amount,
            transaction.payment_status.value,
            status.value,
        )
        return payment

    def get_amount_paid(self, transaction_id: int) -> Decimal:
        """Total paid so far against a transaction."""
        return sum_money(p.amount for p in self.db.list_payments(transaction_id=transaction_id))

    def list_payments(
        self, transaction_id: Optional[int] = None, customer_id: Optional[int] = None
    ) -> list[Payment]:
        """List payments, optionally filtered by transaction or customer."""
        return self.db.list_payments(transaction_id=transaction_id, customer_id=customer_id)

    def get_customer_debt(self, customer_id: int) -> Decimal:
        """Outstanding balance for a customer.

        Everything the customer has ever paid is netted against the final
        amounts of their pending and partial transactions, in aggregate rather
        than invoice by invoice. Never negative.
        """
        with self.db.unit_of_work() as uow:
            principal = sum_money(uow.get_open_principals(customer_id))
            paid = sum_money(uow.list_customer_payment_amounts(customer_id))
        return max(ZERO, principal - paid)
