"""Pure grade and attendance analytics."""

from schoolhub.analytics.aggregation import (
    AttendanceStat,
    DailyAttendance,
    ScoreStat,
    aggregate_attendance,
    aggregate_scores,
    attendance_by,
    daily_attendance,
    group_by,
    round_rate,
    scores_by,
)
from schoolhub.analytics.grading import GRADE_BOUNDARIES, Classification, classify, grade_for_percentage
from schoolhub.analytics.periods import (
    AcademicPeriod,
    AcademicYear,
    DateRange,
    current_academic_year,
    latest_period,
    month_window,
    previous_month_window,
    previous_period,
)
from schoolhub.analytics.records import (
    EXAM_TYPES,
    FINAL_EXAM,
    TERMS,
    AttendanceRecord,
    AttendanceStatus,
    CatalogCourse,
    RosterStudent,
    ScoreRecord,
)
from schoolhub.analytics.reports import (
    RANKING_POLICIES,
    ClassStatistics,
    GradeCell,
    Report,
    ReportFilter,
    StudentReportRow,
    build_report,
    report_to_csv,
    report_to_xlsx,
    sequential_ranks,
    shared_ranks,
)
from schoolhub.analytics.trends import Trend, TrendResult, compare_values, detect_trend, evaluate_trend

__all__ = [
    # Records
    "AttendanceRecord",
    "AttendanceStatus",
    "CatalogCourse",
    "RosterStudent",
    "ScoreRecord",
    "EXAM_TYPES",
    "FINAL_EXAM",
    "TERMS",
    # Grading
    "GRADE_BOUNDARIES",
    "Classification",
    "classify",
    "grade_for_percentage",
    # Aggregation
    "AttendanceStat",
    "DailyAttendance",
    "ScoreStat",
    "aggregate_attendance",
    "aggregate_scores",
    "attendance_by",
    "daily_attendance",
    "group_by",
    "round_rate",
    "scores_by",
    # Periods
    "AcademicPeriod",
    "AcademicYear",
    "DateRange",
    "current_academic_year",
    "latest_period",
    "month_window",
    "previous_month_window",
    "previous_period",
    # Trends
    "Trend",
    "TrendResult",
    "compare_values",
    "detect_trend",
    "evaluate_trend",
    # Reports
    "RANKING_POLICIES",
    "ClassStatistics",
    "GradeCell",
    "Report",
    "ReportFilter",
    "StudentReportRow",
    "build_report",
    "report_to_csv",
    "report_to_xlsx",
    "sequential_ranks",
    "shared_ranks",
]
