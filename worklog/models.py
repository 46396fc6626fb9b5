from sqlalchemy import Column, Integer, String, DateTime, Date, Float, ForeignKey, Text, JSON, CheckConstraint, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()


class User(Base):
    __tablename__ = "users_tbl"

    user_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_email = Column(String(255), unique=True, index=True, nullable=False)
    user_hashed_password = Column(String, nullable=False)
    user_name = Column(String, nullable=False, server_default="")
    user_phone = Column(String, nullable=False, server_default="")
    user_department = Column(String, nullable=False, server_default="")
    user_designation = Column(String, nullable=False, server_default="")
    user_salary_credited_day = Column(Integer, nullable=False, server_default="7")
    user_leave_allowed_per_month = Column(Integer, nullable=False, server_default="0")
    user_earned_leave = Column(Integer, nullable=False, server_default="0")
    user_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    salary_history = relationship(
        "SalaryHistory",
        back_populates="user",
        order_by="SalaryHistory.sh_position_index",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("user_earned_leave >= 0", name="ck_users_earned_leave_nonneg"),
        CheckConstraint("user_leave_allowed_per_month >= 0", name="ck_users_leave_allowed_nonneg"),
    )

    def __repr__(self) -> str:
        return f"<User id={self.user_id} email={self.user_email}>"


class SalaryHistory(Base):
    __tablename__ = "salary_history_tbl"

    sh_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    sh_user_id = Column(Integer, ForeignKey("users_tbl.user_id", ondelete="CASCADE"), nullable=False, index=True)
    sh_position_index = Column(Integer, nullable=False, server_default="0")
    sh_effective_from = Column(Date, nullable=False)
    sh_amount = Column(Float, nullable=False)
    sh_position = Column(String, nullable=True)

    user = relationship("User", back_populates="salary_history")


class DailyLog(Base):
    __tablename__ = "daily_log_tbl"

    dl_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    dl_user_id = Column(Integer, ForeignKey("users_tbl.user_id", ondelete="CASCADE"), nullable=False, index=True)
    dl_date = Column(Date, nullable=False, index=True)
    dl_attendance = Column(String(20), nullable=False, index=True)
    dl_in_time = Column(String(5))       # HH:mm
    dl_out_time = Column(String(5))      # HH:mm
    dl_working_hour = Column(String(8))  # H.mm, minutes after the dot
    dl_standup = Column(Text)
    dl_report = Column(Text)
    dl_remarks = Column(Text)
    dl_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    dl_updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("dl_user_id", "dl_date", name="uq_daily_log_user_date"),
    )

    def __repr__(self) -> str:
        return f"<DailyLog user_id={self.dl_user_id} date={self.dl_date} {self.dl_attendance}>"


class LeaveLog(Base):
    __tablename__ = "leave_log_tbl"

    ll_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    ll_user_id = Column(Integer, ForeignKey("users_tbl.user_id", ondelete="CASCADE"), nullable=False, index=True)
    ll_month = Column(String(7), nullable=False)  # YYYY-MM
    ll_earned_leave = Column(Integer, nullable=False, server_default="0")
    ll_leave_allowed = Column(Integer, nullable=False, server_default="0")
    ll_leave_taken = Column(Integer, nullable=False, server_default="0")
    ll_balance_leave = Column(Integer, nullable=False, server_default="0")
    ll_created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    ll_updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("ll_user_id", "ll_month", name="uq_leave_log_user_month"),
    )


class LeaveAccrual(Base):
    """One row per accrued month: the balance it opened with and closed at"""
    __tablename__ = "leave_accrual_tbl"

    la_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    la_user_id = Column(Integer, ForeignKey("users_tbl.user_id", ondelete="CASCADE"), nullable=False, index=True)
    la_month = Column(String(7), nullable=False)  # YYYY-MM
    la_opening = Column(Integer, nullable=False)
    la_leave_allowed = Column(Integer, nullable=False)
    la_leaves_taken = Column(Integer, nullable=False, server_default="0")
    la_closing = Column(Integer, nullable=False)
    la_updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("la_user_id", "la_month", name="uq_leave_accrual_user_month"),
        CheckConstraint("la_opening >= 0 AND la_closing >= 0", name="ck_leave_accrual_nonneg"),
    )


class MonthlyReport(Base):
    __tablename__ = "monthly_report_tbl"

    mr_id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    mr_user_id = Column(Integer, ForeignKey("users_tbl.user_id", ondelete="CASCADE"), nullable=False, index=True)
    mr_month = Column(String(7), nullable=False)  # YYYY-MM
    mr_summary = Column(JSON, nullable=False)
    mr_saved_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("mr_user_id", "mr_month", name="uq_monthly_report_user_month"),
    )


# Only for initialization
if __name__ == "__main__":
    from worklog.database import engine
    Base.metadata.create_all(bind=engine)
    print("Tables created.")
