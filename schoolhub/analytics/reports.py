"""Term-final report cards for a class.

A report is a snapshot of every student's Final Exam results for one class,
term and academic year: one cell per catalog course, an average across the
graded courses, an overall letter, a rank and class-level statistics.
"""

import csv
import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from io import BytesIO, StringIO

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from schoolhub.analytics.grading import classify, grade_for_percentage
from schoolhub.analytics.records import (
    FINAL_EXAM,
    CatalogCourse,
    Identifier,
    RosterStudent,
    ScoreRecord,
)
from schoolhub.schemas.common import BaseSchema

logger = logging.getLogger(__name__)

NOT_GRADED = "N/A"
PASS_MARK = 50.0

RankingPolicy = Callable[[Sequence[float]], list[int]]


class ReportFilter(BaseSchema):
    """Which class, term and academic year a report covers."""

    class_id: Identifier
    term: str
    academic_year: str


class GradeCell(BaseSchema):
    """A graded course on a report card."""

    score: float
    max_score: float
    percentage: float
    grade: str


class StudentReportRow(BaseSchema):
    """One student's line on the report."""

    student: RosterStudent
    cells: dict[str, GradeCell | str]
    average_percentage: float = 0.0
    overall_grade: str
    rank: int = 0


class ClassStatistics(BaseSchema):
    """Class-level figures derived from the students' averages."""

    highest_average: float = 0.0
    lowest_average: float = 0.0
    class_average: float = 0.0
    pass_rate: float = 0.0


class Report(BaseSchema):
    """Serializable report snapshot."""

    class_id: Identifier
    term: str
    academic_year: str
    courses: list[CatalogCourse]
    students: list[StudentReportRow]
    class_stats: ClassStatistics
    generated_at: datetime

    def snapshot(self) -> dict:
        """Report contents without the generation timestamp."""
        return self.model_dump(mode="json", exclude={"generated_at"})


# ==========================================
# Ranking policies
# ==========================================

def sequential_ranks(averages: Sequence[float]) -> list[int]:
    """Ranks 1..n in the given (already sorted) order; ties get distinct ranks."""
    return list(range(1, len(averages) + 1))


def shared_ranks(averages: Sequence[float]) -> list[int]:
    """Competition ranking: tied averages share a rank, e.g. 1, 1, 3."""
    ranks: list[int] = []
    for index, average in enumerate(averages):
        if index > 0 and average == averages[index - 1]:
            ranks.append(ranks[-1])
        else:
            ranks.append(index + 1)
    return ranks


RANKING_POLICIES: dict[str, RankingPolicy] = {
    "sequential": sequential_ranks,
    "shared": shared_ranks,
}


# ==========================================
# Report building
# ==========================================

def _course_key(course_id: Identifier) -> str:
    return str(course_id)


def _matches(record: ScoreRecord, report_filter: ReportFilter) -> bool:
    return (
        record.exam_type == FINAL_EXAM
        and str(record.class_id) == str(report_filter.class_id)
        and record.term == report_filter.term
        and record.academic_year == report_filter.academic_year
    )


def _build_row(
    student: RosterStudent,
    courses: Sequence[CatalogCourse],
    records_by_course: dict[str, ScoreRecord],
) -> StudentReportRow:
    cells: dict[str, GradeCell | str] = {}
    percentages: list[float] = []

    for course in courses:
        key = _course_key(course.id)
        record = records_by_course.get(key)
        if record is None or record.max_score <= 0:
            cells[key] = NOT_GRADED
            continue
        percentage, grade = classify(record.score, record.max_score)
        cells[key] = GradeCell(
            score=record.score,
            max_score=record.max_score,
            percentage=percentage,
            grade=grade,
        )
        percentages.append(percentage)

    average = sum(percentages) / len(percentages) if percentages else 0.0
    return StudentReportRow(
        student=student.model_copy(deep=True),
        cells=cells,
        average_percentage=average,
        overall_grade=grade_for_percentage(average),
    )


def _class_statistics(rows: Sequence[StudentReportRow]) -> ClassStatistics:
    if not rows:
        return ClassStatistics()

    averages = [row.average_percentage for row in rows]
    passing = sum(1 for average in averages if average >= PASS_MARK)
    return ClassStatistics(
        highest_average=averages[0],
        lowest_average=averages[-1],
        class_average=sum(averages) / len(averages),
        pass_rate=passing / len(averages) * 100,
    )


def build_report(
    students: Sequence[RosterStudent],
    courses: Sequence[CatalogCourse],
    score_records: Sequence[ScoreRecord],
    report_filter: ReportFilter,
    ranking: RankingPolicy = sequential_ranks,
    generated_at: datetime | None = None,
) -> Report:
    """Build a ranked Final Exam report for a roster.

    Only Final Exam records for the filter's class, term and academic year
    count; a course without such a record is reported as ``"N/A"``. When a
    student has several matching records for a course the last one wins.
    """
    # student key -> course key -> record
    records: dict[str, dict[str, ScoreRecord]] = {}
    for record in score_records:
        if not _matches(record, report_filter):
            continue
        if record.max_score <= 0:
            logger.warning(
                "Final exam record with non-positive max_score reported as not graded "
                f"(student={record.student_id}, course={record.course_id})"
            )
        records.setdefault(str(record.student_id), {})[_course_key(record.course_id)] = record

    rows = [
        _build_row(student, courses, records.get(str(student.id), {}))
        for student in students
    ]

    # sorted() is stable, so equal averages keep roster order
    rows = sorted(rows, key=lambda row: row.average_percentage, reverse=True)
    ranks = ranking([row.average_percentage for row in rows])
    for row, rank in zip(rows, ranks):
        row.rank = rank

    return Report(
        class_id=report_filter.class_id,
        term=report_filter.term,
        academic_year=report_filter.academic_year,
        courses=[course.model_copy() for course in courses],
        students=rows,
        class_stats=_class_statistics(rows),
        generated_at=generated_at or datetime.now(timezone.utc),
    )


# ==========================================
# Export
# ==========================================

def report_table(report: Report) -> list[list]:
    """Header plus one row per student, in rank order."""
    header = ["Student Name", "Registration Number", "Rank"]
    header.extend(course.name for course in report.courses)
    header.extend(["Average", "Overall Grade"])

    table: list[list] = [header]
    for row in report.students:
        line: list = [
            row.student.full_name,
            row.student.registration_number or "",
            row.rank,
        ]
        for course in report.courses:
            cell = row.cells.get(_course_key(course.id), NOT_GRADED)
            line.append(cell.grade if isinstance(cell, GradeCell) else cell)
        line.append(f"{row.average_percentage:.2f}")
        line.append(row.overall_grade)
        table.append(line)
    return table


def report_to_csv(report: Report) -> str:
    """Render the report table as CSV text."""
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerows(report_table(report))
    return output.getvalue()


def report_to_xlsx(report: Report, title: str | None = None) -> bytes:
    """Render the report table as an Excel workbook."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Report"

    # Styles
    title_font = Font(bold=True, size=14)
    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    thin_border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )
    center_align = Alignment(horizontal='center', vertical='center')

    table = report_table(report)
    header, rows = table[0], table[1:]

    title_text = title or f"Report - {report.term} {report.academic_year}"
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(header))
    title_cell = ws.cell(row=1, column=1, value=title_text)
    title_cell.font = title_font
    title_cell.alignment = center_align
    title_cell.fill = PatternFill(start_color="B4C6E7", end_color="B4C6E7", fill_type="solid")

    for col_idx, value in enumerate(header, start=1):
        cell = ws.cell(row=2, column=col_idx, value=value)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = thin_border
        cell.alignment = center_align

    for row_idx, line in enumerate(rows, start=3):
        for col_idx, value in enumerate(line, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value).border = thin_border

    ws.column_dimensions[get_column_letter(1)].width = 25
    ws.column_dimensions[get_column_letter(2)].width = 20
    for col_idx in range(3, len(header) + 1):
        ws.column_dimensions[get_column_letter(col_idx)].width = 14

    # Class statistics below the table
    stats_row = len(rows) + 4
    stats = report.class_stats
    for offset, (label, value) in enumerate([
        ("Highest Average", f"{stats.highest_average:.2f}"),
        ("Lowest Average", f"{stats.lowest_average:.2f}"),
        ("Class Average", f"{stats.class_average:.2f}"),
        ("Pass Rate (%)", f"{stats.pass_rate:.2f}"),
    ]):
        ws.cell(row=stats_row + offset, column=1, value=label).font = Font(bold=True)
        ws.cell(row=stats_row + offset, column=2, value=value)

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()
