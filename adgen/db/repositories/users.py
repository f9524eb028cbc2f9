from sqlalchemy.orm import Session
from adgen.db.models import User
from typing import Optional

class UserRepository:
    """Repository for user records. Credit balances are changed only through CreditLedger."""

    def __init__(self, db: Session):
        self.db = db

    def create_user(self, user_id: str = None, email: str = None, name: str = None, credits: int = 0) -> User:
        """
        Create a user with an opening balance.

        Args:
            user_id: User ID from the identity provider (generated if omitted)
            email: Email address (optional)
            name: Display name (optional)
            credits: Opening credit balance

        Returns:
            Created user
        """
        user = User(email=email, name=name, credits=credits)
        if user_id:
            user.id = user_id
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()
