import logging

from worklog.core.exceptions import NotFoundError, ValidationError
from worklog.repositories.leave_accrual_repo import LeaveAccrualRepository
from worklog.repositories.user_repo import UserRepository
from worklog.schemas.profile import ProfileResponse, ProfileUpdate, SalaryAction, SalaryHistoryChange
from worklog.services.leave_accrual_service import user_lock

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, user_repo: UserRepository, leave_accrual_repo: LeaveAccrualRepository):
        self.user_repo = user_repo
        self.leave_accrual_repo = leave_accrual_repo

    def _get_user(self, user_id: int):
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_profile(self, user_id: int) -> ProfileResponse:
        return ProfileResponse.from_model(self._get_user(user_id))

    def update_profile(self, user_id: int, request: ProfileUpdate) -> ProfileResponse:
        """Update editable profile fields and apply an optional salary history change"""
        changes = request.model_dump(exclude_unset=True, exclude={"salary_history"})
        changes = {key: value for key, value in changes.items() if value is not None}

        # Leave fields share the accrual lock so a concurrent leave write cannot overwrite them
        with user_lock(user_id):
            user = self._get_user(user_id)
            if changes:
                if "earned_leave" in changes:
                    # A hand-set balance restarts the accrual chain from this value
                    self.leave_accrual_repo.clear(user_id)
                user = self.user_repo.update_fields(user, changes)
                logger.info(f"Updated profile fields {sorted(changes)} for user {user_id}")

        if request.salary_history is not None:
            user = self._apply_salary_change(user, request.salary_history)

        return ProfileResponse.from_model(user)

    def _apply_salary_change(self, user, change: SalaryHistoryChange):
        records = [
            {
                "effective_from": entry.sh_effective_from,
                "amount": entry.sh_amount,
                "position": entry.sh_position,
            }
            for entry in user.salary_history
        ]

        if change.action in (SalaryAction.ADD, SalaryAction.EDIT) and change.record is None:
            raise ValidationError(f"Salary history '{change.action.value}' requires a record")
        if change.action in (SalaryAction.EDIT, SalaryAction.DELETE):
            if change.index is None or not 0 <= change.index < len(records):
                raise NotFoundError(f"Salary history entry {change.index} not found")

        if change.action == SalaryAction.ADD:
            records.append(change.record.model_dump())
        elif change.action == SalaryAction.EDIT:
            records[change.index] = change.record.model_dump()
        elif change.action == SalaryAction.DELETE:
            records.pop(change.index)
        elif change.action == SalaryAction.REPLACE:
            if change.records is None:
                raise ValidationError("Salary history 'replace' requires records")
            records = [record.model_dump() for record in change.records]

        logger.info(f"Salary history {change.action.value} for user {user.user_id}")
        return self.user_repo.replace_salary_history(user, records)
