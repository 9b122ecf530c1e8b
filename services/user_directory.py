# services/user_directory.py
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from errors import AuthError, ConflictError, NotFoundError
from model import User
from utils.security import hash_mpin, hash_password, verify_mpin

logger = logging.getLogger(__name__)


class UserDirectory:
    """Signup and login over the users table"""

    def __init__(self, db: Session):
        self.db = db

    def find_by_phone(self, mobile_number: str) -> Optional[User]:
        return self.db.query(User).filter(User.mobile_number == mobile_number).first()

    def signup(self, mobile_number: str, name: str, email: str, password: str, mpin: str) -> User:
        if self.find_by_phone(mobile_number) is not None:
            raise ConflictError("Mobile number already exists.")

        user = User(
            mobile_number=mobile_number,
            name=name,
            email=email,
            password_hash=hash_password(password),
            mpin_hash=hash_mpin(mpin),
            wallet_amount=0.0,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with another signup for the same number
            self.db.rollback()
            raise ConflictError("Mobile number already exists.")
        self.db.refresh(user)

        logger.info(f"User {user.id} signed up")
        return user

    def login(self, mobile_number: str, mpin: str) -> Tuple[User, List[User]]:
        """Return the user and every other registered user, in signup order"""
        user = self.find_by_phone(mobile_number)
        if user is None:
            raise NotFoundError("User not found.")
        if not verify_mpin(mpin, user.mpin_hash):
            logger.warning(f"Rejected mpin for user {user.id}")
            raise AuthError("Invalid MPIN.")

        contacts = (
            self.db.query(User)
            .filter(User.mobile_number != mobile_number)
            .order_by(User.id)
            .all()
        )
        logger.info(f"User {user.id} logged in")
        return user, contacts
