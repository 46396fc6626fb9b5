import logging
from typing import List, Optional, Dict, Any
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from worklog.core.exceptions import RepositoryError
from worklog.models import User, SalaryHistory

logger = logging.getLogger(__name__)

# Editable profile keys -> User columns
PROFILE_COL_MAP = {
    "name": "user_name",
    "phone": "user_phone",
    "department": "user_department",
    "designation": "user_designation",
    "salary_credited_day": "user_salary_credited_day",
    "leave_allowed_per_month": "user_leave_allowed_per_month",
    "earned_leave": "user_earned_leave",
}


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        try:
            return self.db.query(User).filter(User.user_id == user_id).first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while fetching user {user_id}: {str(e)}")

    def get_by_email(self, email: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.user_email == email).first()
        except SQLAlchemyError as e:
            raise RepositoryError(f"Database error while fetching user by email: {str(e)}")

    def create(self, email: str, hashed_password: str, salary: float,
               salary_credited_day: int) -> User:
        """Create a user with the registration defaults and one salary entry"""
        try:
            user = User(
                user_email=email,
                user_hashed_password=hashed_password,
                user_name="",
                user_phone="",
                user_department="",
                user_designation="",
                user_salary_credited_day=salary_credited_day,
                user_leave_allowed_per_month=0,
                user_earned_leave=0,
            )
            user.salary_history.append(
                SalaryHistory(sh_position_index=0, sh_effective_from=date.today(), sh_amount=salary)
            )
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error while creating user: {str(e)}")

    def set_earned_leave(self, user_id: int, value: int) -> Optional[User]:
        """Set earned leave; flushed only, the caller commits"""
        try:
            user = self.get_by_id(user_id)
            if not user:
                return None
            user.user_earned_leave = value
            self.db.flush()
            return user
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error while updating earned leave: {str(e)}")

    def update_fields(self, user: User, fields: Dict[str, Any]) -> User:
        try:
            for key, value in fields.items():
                column_name = PROFILE_COL_MAP.get(key)
                if column_name:
                    setattr(user, column_name, value)
            self.db.commit()
            self.db.refresh(user)
            return user
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error while updating profile: {str(e)}")

    def set_password(self, user: User, hashed_password: str) -> User:
        try:
            user.user_hashed_password = hashed_password
            self.db.commit()
            self.db.refresh(user)
            return user
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error while resetting password: {str(e)}")

    def replace_salary_history(self, user: User, records: List[Dict[str, Any]]) -> User:
        """Rewrite the whole salary history in the given order"""
        try:
            user.salary_history.clear()
            self.db.flush()
            for index, record in enumerate(records):
                user.salary_history.append(SalaryHistory(
                    sh_position_index=index,
                    sh_effective_from=record["effective_from"],
                    sh_amount=record["amount"],
                    sh_position=record.get("position"),
                ))
            self.db.commit()
            self.db.refresh(user)
            return user
        except SQLAlchemyError as e:
            self.db.rollback()
            raise RepositoryError(f"Database error while updating salary history: {str(e)}")
