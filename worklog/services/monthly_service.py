import io
import logging
from collections import Counter
from datetime import timedelta
from typing import List, Optional, Tuple

import pandas as pd

from worklog.core.exceptions import NotFoundError, ValidationError
from worklog.models import DailyLog
from worklog.repositories.daily_log_repo import DailyLogRepository
from worklog.repositories.monthly_report_repo import MonthlyReportRepository
from worklog.schemas.daily_logs import AttendanceStatus, DailyLogResponse
from worklog.schemas.monthly import MonthlySummary, SavedMonthlyReport
from worklog.services.leave_accrual_service import LeaveAccrualService
from worklog.utils.dates import count_weekday, days_in_month, parse_month
from worklog.utils.working_hours import (
    format_working_hour, parse_working_hour, to_decimal_hours
)

logger = logging.getLogger(__name__)

WEEKEND_STRATEGIES = ("sundays", "records")


class MonthlyService:
    def __init__(self, daily_log_repo: DailyLogRepository,
                 monthly_report_repo: MonthlyReportRepository,
                 accrual_service: LeaveAccrualService,
                 weekend_strategy: str = "sundays",
                 standard_working_hours: int = 9):
        if weekend_strategy not in WEEKEND_STRATEGIES:
            raise ValidationError(f"Unknown weekend strategy: {weekend_strategy}")
        self.daily_log_repo = daily_log_repo
        self.monthly_report_repo = monthly_report_repo
        self.accrual_service = accrual_service
        self.weekend_strategy = weekend_strategy
        self.standard_working_hours = standard_working_hours

    def summarize(self, user_id: int, month: str) -> Tuple[MonthlySummary, List[DailyLog]]:
        """Read-only rollup of a YYYY-MM month; earned leave is derived, not stored"""
        month = (month or "").strip()
        parse_month(month)
        records = self.daily_log_repo.find_month(user_id, month)
        counts = Counter(record.dl_attendance for record in records)

        total_days = days_in_month(month)
        if self.weekend_strategy == "sundays":
            weekend_count = count_weekday(month)
        else:
            weekend_count = counts[AttendanceStatus.WEEKEND.value]
        leave_count = counts[AttendanceStatus.LEAVE.value]
        holiday_count = counts[AttendanceStatus.HOLIDAY.value]
        working_days = max(0, total_days - leave_count - holiday_count - weekend_count)

        worked = self._total_working_time(records)
        worked_hours = to_decimal_hours(worked)
        per_day_working = round(worked_hours / working_days, 2) if working_days > 0 else 0

        leave = self.accrual_service.compute(user_id, month)

        summary = MonthlySummary(
            month=month,
            total_days=total_days,
            weekend_count=weekend_count,
            holiday_count=holiday_count,
            leave_count=leave_count,
            absent_count=counts[AttendanceStatus.ABSENT.value],
            present_count=counts[AttendanceStatus.PRESENT.value] + counts[AttendanceStatus.WORK_FROM_HOME.value],
            halfday_count=counts[AttendanceStatus.HALFDAY.value],
            working_days=working_days,
            working_hour=format_working_hour(worked),
            working_hour_decimal=worked_hours,
            target_hour=working_days * self.standard_working_hours,
            per_day_working=per_day_working,
            leave_allowed_per_month=leave.leave_allowed,
            earned_leave=leave.earned_leave,
            balance_leave=leave.balance_leave,
        )
        return summary, records

    def get_monthly_summary(self, user_id: int, month: str) -> Tuple[MonthlySummary, List[DailyLogResponse]]:
        summary, records = self.summarize(user_id, month)
        return summary, [DailyLogResponse.from_model(record) for record in records]

    def save_summary(self, user_id: int, month: str) -> SavedMonthlyReport:
        """Store a snapshot of the current summary, replacing any earlier one for the month"""
        summary, _ = self.summarize(user_id, month)
        report = self.monthly_report_repo.upsert(user_id, summary.month, summary.model_dump())
        logger.info(f"Saved monthly summary for user {user_id} month {summary.month}")
        return self._to_saved(report)

    def list_saved(self, user_id: int, month: Optional[str] = None) -> List[SavedMonthlyReport]:
        if month:
            parse_month(month)
        return [self._to_saved(report) for report in self.monthly_report_repo.list(user_id, month)]

    def export_month(self, user_id: int, month: str) -> bytes:
        """Month's logs plus summary as an xlsx workbook"""
        summary, records = self.summarize(user_id, month)
        if not records:
            raise NotFoundError(f"No daily logs found for {summary.month}")

        df = pd.DataFrame([
            {
                "Date": record.dl_date.isoformat(),
                "Attendance": record.dl_attendance,
                "In Time": record.dl_in_time or "-",
                "Out Time": record.dl_out_time or "-",
                "Working Hour": record.dl_working_hour or "0.00",
                "Remarks": record.dl_remarks or "",
            }
            for record in sorted(records, key=lambda r: r.dl_date)
        ])
        summary_df = pd.DataFrame(
            [{"Metric": key, "Value": value} for key, value in summary.model_dump().items()]
        )

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="xlsxwriter") as writer:
            df.to_excel(writer, index=False, sheet_name="Daily Logs")
            summary_df.to_excel(writer, index=False, sheet_name="Summary")

            workbook = writer.book
            worksheet = writer.sheets["Daily Logs"]
            leave_format = workbook.add_format({
                "bg_color": "#FFEB9C",
                "font_color": "#9C5700",
            })
            status_col_index = df.columns.get_loc("Attendance")
            worksheet.conditional_format(
                1, status_col_index,
                len(df), status_col_index,
                {
                    "type": "cell",
                    "criteria": "==",
                    "value": '"Leave"',
                    "format": leave_format,
                }
            )
            worksheet.set_column("A:A", 12)
            worksheet.set_column("B:B", 16)
            worksheet.set_column("C:E", 12)
            worksheet.set_column("F:F", 40)
            writer.sheets["Summary"].set_column("A:B", 24)
        output.seek(0)
        return output.getvalue()

    @staticmethod
    def _total_working_time(records: List[DailyLog]) -> timedelta:
        total = timedelta(0)
        for record in records:
            try:
                total += parse_working_hour(record.dl_working_hour)
            except ValidationError as e:
                # Legacy rows may hold values like "9.75"; they are left out of the total
                logger.warning(f"Skipping daily log {record.dl_id} in monthly total: {e.message}")
        return total

    @staticmethod
    def _to_saved(report) -> SavedMonthlyReport:
        return SavedMonthlyReport(
            id=report.mr_id,
            month=report.mr_month,
            summary=report.mr_summary,
            saved_at=report.mr_saved_at.isoformat() if report.mr_saved_at else None,
        )
