"""
Leave accrual policies.

Two accrual rules have been used for the same data over time, so both are
kept as named strategies and the active one is picked by configuration
(``Settings.LEAVE_POLICY``).  Each policy is a pure function of the month's
leave count and the user's current balance; persistence lives in
``LeaveAccrualService``.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Type

from worklog.core.exceptions import ValidationError


@dataclass(frozen=True)
class LeaveComputation:
    leaves_taken: int
    leave_allowed: int
    previous_earned: int
    earned_leave: int

    @property
    def balance_leave(self) -> int:
        """Leave still available this month: earned + allowance - taken, never negative"""
        return max(0, self.previous_earned + self.leave_allowed - self.leaves_taken)


class LeavePolicy(ABC):
    name: str = ""

    @abstractmethod
    def next_earned(self, *, earned: int, allowed: int, leaves_taken: int) -> int:
        raise NotImplementedError

    def compute(self, *, earned: int, allowed: int, leaves_taken: int) -> LeaveComputation:
        earned = max(0, int(earned or 0))
        allowed = max(0, int(allowed or 0))
        leaves_taken = max(0, int(leaves_taken or 0))
        new_earned = max(0, self.next_earned(earned=earned, allowed=allowed, leaves_taken=leaves_taken))
        return LeaveComputation(
            leaves_taken=leaves_taken,
            leave_allowed=allowed,
            previous_earned=earned,
            earned_leave=new_earned,
        )


class CeilingDeductionPolicy(LeavePolicy):
    """Leaves within the monthly allowance never touch the earned balance."""

    name = "ceiling"

    def next_earned(self, *, earned: int, allowed: int, leaves_taken: int) -> int:
        excess = max(0, leaves_taken - allowed)
        return max(0, earned - excess)


class CarryForwardPolicy(LeavePolicy):
    """
    Unused allowance is banked; taken leave is consumed from the earned balance.

    When leaves exceed the earned balance but stay below earned + allowance the
    balance drops to zero rather than keeping a partial remainder.  Existing
    balances were computed this way, so the rule is kept as is.
    """

    name = "carry_forward"

    def next_earned(self, *, earned: int, allowed: int, leaves_taken: int) -> int:
        if leaves_taken == 0:
            return earned + allowed
        total = earned + allowed
        if leaves_taken >= total:
            return 0
        if leaves_taken <= earned:
            return earned - leaves_taken
        return 0


POLICIES: Dict[str, Type[LeavePolicy]] = {
    CeilingDeductionPolicy.name: CeilingDeductionPolicy,
    CarryForwardPolicy.name: CarryForwardPolicy,
}


def get_leave_policy(name: str) -> LeavePolicy:
    key = (name or "").strip().lower()
    policy_cls = POLICIES.get(key)
    if not policy_cls:
        raise ValidationError(f"Unknown leave policy: {name} (expected one of {', '.join(sorted(POLICIES))})")
    return policy_cls()
