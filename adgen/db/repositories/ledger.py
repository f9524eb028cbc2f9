"""Credit ledger: per-user balances changed only through atomic SQL updates.

Every balance change is a single conditional ``UPDATE`` evaluated by the
database, so concurrent requests for the same user cannot overdraw even when
they run in different processes. Refunds and captures are keyed by a
reservation id and flip its status with a conditional update, which makes
settling the same reservation twice a no-op.
"""
import datetime
import logging
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from adgen.db.models import CreditReservation, User
from adgen.domain.errors import InsufficientCreditsError, ValidationError

logger = logging.getLogger(__name__)

RESERVED = "reserved"
CAPTURED = "captured"
REFUNDED = "refunded"


class CreditLedger:
    """Repository for credit reservations and balances."""

    def __init__(self, db: Session):
        self.db = db

    def get_balance(self, user_id: str) -> Optional[int]:
        """
        Get a user's current credit balance.

        Returns:
            Balance, or None if the user does not exist
        """
        user = self.db.query(User).filter(User.id == user_id).first()
        return user.credits if user else None

    def reserve(self, user_id: str, amount: int, action: str) -> CreditReservation:
        """
        Take credits from a user for one paid action.

        Args:
            user_id: User ID
            amount: Credits to take
            action: Label of the paid action ("image", "video")

        Returns:
            The reservation, in status "reserved"

        Raises:
            InsufficientCreditsError: if the user is unknown or the balance is below amount
        """
        if amount <= 0:
            raise ValidationError("Reservation amount must be positive")

        result = self.db.execute(
            update(User)
            .where(User.id == user_id, User.credits >= amount)
            .values(credits=User.credits - amount)
        )
        if result.rowcount != 1:
            self.db.rollback()
            raise InsufficientCreditsError("Insufficient credits")

        reservation = CreditReservation(user_id=user_id, amount=amount, action=action, status=RESERVED)
        self.db.add(reservation)
        self.db.commit()
        self.db.refresh(reservation)
        logger.info(f"Reserved {amount} credits from user {user_id} for {action} ({reservation.id})")
        return reservation

    def refund(self, reservation_id: str) -> bool:
        """
        Return a reservation's credits to its user.

        Returns:
            True if credits were returned, False if the reservation was already settled
        """
        reservation = self.get_reservation(reservation_id)
        if not reservation:
            return False

        if not self._settle(reservation_id, REFUNDED):
            logger.info(f"Reservation {reservation_id} already settled, refund skipped")
            return False

        self.db.execute(
            update(User)
            .where(User.id == reservation.user_id)
            .values(credits=User.credits + reservation.amount)
        )
        self.db.commit()
        logger.info(f"Refunded {reservation.amount} credits to user {reservation.user_id} ({reservation_id})")
        return True

    def capture(self, reservation_id: str) -> bool:
        """
        Keep a reservation's credits as spent.

        Returns:
            True if captured, False if the reservation was already settled
        """
        captured = self._settle(reservation_id, CAPTURED)
        self.db.commit()
        return captured

    def rollback(self) -> None:
        self.db.rollback()

    def get_reservation(self, reservation_id: str) -> Optional[CreditReservation]:
        return self.db.query(CreditReservation).filter(CreditReservation.id == reservation_id).first()

    def _settle(self, reservation_id: str, status: str) -> bool:
        result = self.db.execute(
            update(CreditReservation)
            .where(CreditReservation.id == reservation_id, CreditReservation.status == RESERVED)
            .values(status=status, settled_at=datetime.datetime.utcnow())
        )
        return result.rowcount == 1
