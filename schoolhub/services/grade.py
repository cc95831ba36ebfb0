"""Grade service for grade entry, student, class and course views, and class reports."""

import logging
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from schoolhub.analytics.aggregation import aggregate_scores, group_by, round_rate
from schoolhub.analytics.grading import classify
from schoolhub.analytics.periods import (
    AcademicPeriod,
    current_academic_year,
    latest_period,
    period_sort_key,
    previous_period,
)
from schoolhub.analytics.records import (
    EXAM_TYPES,
    FINAL_EXAM,
    TERMS,
    CatalogCourse,
    RosterStudent,
    ScoreRecord,
)
from schoolhub.analytics.reports import (
    RANKING_POLICIES,
    Report,
    ReportFilter,
    build_report,
    report_to_csv,
    report_to_xlsx,
)
from schoolhub.analytics.trends import evaluate_trend
from schoolhub.core.config import settings
from schoolhub.core.exceptions import NotFoundError
from schoolhub.models.course import Course
from schoolhub.models.grade import GradeRecord
from schoolhub.models.school_class import SchoolClass
from schoolhub.models.student import Student
from schoolhub.schemas.grade import (
    AcademicSummary,
    ClassGradesResponse,
    CourseGradesResponse,
    GradeFormData,
    GradeRecordCreate,
    GradeRecordResponse,
    StudentCourseGrades,
    StudentGradesResponse,
)
from schoolhub.schemas.report import ReportFormat

logger = logging.getLogger(__name__)


class GradeService:
    """Grade management and reporting service."""

    def __init__(self, db: Session):
        self.db = db

    def _record_to_response(self, record: GradeRecord) -> GradeRecordResponse:
        """Convert GradeRecord to response schema."""
        return GradeRecordResponse.model_validate({
            "id": record.id,
            "student_id": record.student_id,
            "student_name": record.student.full_name if record.student else "",
            "course_id": record.course_id,
            "course_name": record.course.name if record.course else "",
            "class_id": record.class_id,
            "academic_year": record.academic_year,
            "term": record.term,
            "exam_type": record.exam_type,
            "score": record.score,
            "max_score": record.max_score,
            "percentage": record.percentage,
            "grade": record.grade,
            "remarks": record.remarks,
            "graded_date": record.graded_date,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        })

    # ==========================================
    # Grade Entry
    # ==========================================

    def upsert_grade(self, request: GradeRecordCreate) -> GradeRecordResponse:
        """Create a grade, or update the one with the same student, course, term and exam type."""
        classification = classify(request.score, request.max_score)

        self._get_or_404(Student, request.student_id, "Student")
        self._get_or_404(Course, request.course_id, "Course")
        self._get_or_404(SchoolClass, request.class_id, "Class")

        existing = self._get_existing_record(
            request.student_id, request.course_id, request.term, request.exam_type
        )

        values = {
            "class_id": request.class_id,
            "academic_year": request.academic_year,
            "score": request.score,
            "max_score": request.max_score,
            "percentage": classification.percentage,
            "grade": classification.grade,
            "remarks": request.remarks,
            "graded_date": datetime.now(timezone.utc),
        }

        if existing:
            for field, value in values.items():
                setattr(existing, field, value)
            record = existing
            logger.info(f"Updated grade {record.id} for student {request.student_id}")
        else:
            record = GradeRecord(
                student_id=request.student_id,
                course_id=request.course_id,
                term=request.term,
                exam_type=request.exam_type,
                **values,
            )
            self.db.add(record)

        self.db.flush()
        self.db.refresh(record)
        return self._record_to_response(record)

    def get_grade(self, grade_id: int) -> GradeRecordResponse:
        """Get grade record by ID."""
        return self._record_to_response(self._get_or_404(GradeRecord, grade_id, "Grade"))

    def delete_grade(self, grade_id: int) -> None:
        """Delete a grade record."""
        record = self._get_or_404(GradeRecord, grade_id, "Grade")
        self.db.delete(record)
        self.db.flush()

    def get_grade_form_data(self, today: date | None = None) -> GradeFormData:
        """Exam types, terms and the academic year offered on the grade form."""
        return GradeFormData(
            exam_types=list(EXAM_TYPES),
            terms=list(TERMS),
            current_academic_year=current_academic_year(today or date.today()),
        )

    # ==========================================
    # Student Views
    # ==========================================

    def get_student_grades(self, student_id: int) -> StudentGradesResponse:
        """All grades of a student, newest period first, grouped by year then term."""
        self._get_or_404(Student, student_id, "Student")

        records = self._get_student_records(student_id)
        records.sort(
            key=lambda r: period_sort_key(AcademicPeriod(r.academic_year, r.term)),
            reverse=True,
        )
        grades = [self._record_to_response(r) for r in records]

        grouped = {
            year: group_by(year_grades, lambda g: g.term)
            for year, year_grades in group_by(grades, lambda g: g.academic_year).items()
        }

        return StudentGradesResponse(student_id=student_id, grades=grades, grouped=grouped)

    def get_student_academic_summary(self, student_id: int) -> AcademicSummary:
        """Average of the student's latest term and its trend against the term before."""
        self._get_or_404(Student, student_id, "Student")

        records = [ScoreRecord.model_validate(r) for r in self._get_student_records(student_id)]
        by_period = group_by(records, lambda r: AcademicPeriod(r.academic_year, r.term))

        current = latest_period(by_period.keys())
        if current is None:
            return AcademicSummary(student_id=student_id)

        current_records = by_period[current]
        current_stat = aggregate_scores(current_records)

        previous = previous_period(current.academic_year, current.term)
        previous_stat = aggregate_scores(by_period.get(previous, [])) if previous else None
        trend = evaluate_trend(current_stat, previous_stat)

        return AcademicSummary(
            student_id=student_id,
            current_academic_year=current.academic_year,
            current_term=current.term,
            average_score=round_rate(current_stat.average_percentage),
            total_courses=len({str(r.course_id) for r in current_records}),
            performance_trend=trend.trend,
            has_prior_data=trend.has_prior_data,
            previous_academic_year=previous.academic_year if previous else None,
            previous_term=previous.term if previous else None,
            previous_average_score=(
                round_rate(trend.previous_value) if trend.previous_value is not None else None
            ),
        )

    # ==========================================
    # Class and Course Views
    # ==========================================

    def get_class_grades(
        self,
        class_id: int,
        course_id: int | None = None,
        term: str | None = None,
    ) -> ClassGradesResponse:
        """Roster of a class with each student's grades grouped by course.

        Grades of students no longer in the class are left out.
        """
        school_class = self._get_or_404(SchoolClass, class_id, "Class")
        students = self._get_students_by_class(class_id)

        query = select(GradeRecord).where(GradeRecord.class_id == class_id)
        if course_id is not None:
            query = query.where(GradeRecord.course_id == course_id)
        if term:
            query = query.where(GradeRecord.term == term)
        records = self.db.execute(query.order_by(GradeRecord.id)).scalars().all()

        by_student = group_by(
            [self._record_to_response(r) for r in records],
            lambda g: g.student_id,
        )

        return ClassGradesResponse(
            class_id=class_id,
            class_name=school_class.name,
            academic_year=school_class.academic_year,
            students=[
                StudentCourseGrades(
                    student_id=student.id,
                    student_name=student.full_name,
                    registration_number=student.registration_number,
                    courses={
                        str(course): grades
                        for course, grades in group_by(
                            by_student.get(student.id, []), lambda g: g.course_id
                        ).items()
                    },
                )
                for student in students
            ],
            terms=sorted({r.term for r in records}),
        )

    def get_course_grades(
        self,
        course_id: int,
        class_id: int | None = None,
        term: str | None = None,
    ) -> CourseGradesResponse:
        """Grades of a course, newest year and term first, grouped by class then term."""
        course = self._get_or_404(Course, course_id, "Course")

        query = (
            select(GradeRecord)
            .join(Student, GradeRecord.student_id == Student.id)
            .where(GradeRecord.course_id == course_id)
        )
        if class_id is not None:
            query = query.where(GradeRecord.class_id == class_id)
        if term:
            query = query.where(GradeRecord.term == term)
        query = query.order_by(
            GradeRecord.academic_year.desc(),
            GradeRecord.term.desc(),
            Student.last_name,
            Student.first_name,
        )
        grades = [self._record_to_response(r) for r in self.db.execute(query).scalars().all()]

        grouped = {
            str(class_key): group_by(class_grades, lambda g: g.term)
            for class_key, class_grades in group_by(grades, lambda g: g.class_id).items()
        }

        return CourseGradesResponse(
            course_id=course_id,
            course_name=course.name,
            course_code=course.course_code,
            grades=grades,
            grouped=grouped,
            terms=sorted({g.term for g in grades}),
        )

    # ==========================================
    # Class Reports
    # ==========================================

    def generate_class_report(
        self,
        class_id: int,
        term: str,
        academic_year: str,
    ) -> Report:
        """Build the ranked Final Exam report for a class."""
        school_class = self._get_or_404(SchoolClass, class_id, "Class")

        students = self._get_students_by_class(class_id)

        courses = self.db.execute(
            select(Course).order_by(Course.name)
        ).scalars().all()

        records = self.db.execute(
            select(GradeRecord).where(
                GradeRecord.class_id == class_id,
                GradeRecord.term == term,
                GradeRecord.academic_year == academic_year,
                GradeRecord.exam_type == FINAL_EXAM,
            )
        ).scalars().all()

        logger.info(
            f"Building report for class {school_class.name} ({term} {academic_year}): "
            f"{len(students)} students, {len(courses)} courses, {len(records)} final exam grades"
        )

        return build_report(
            students=[RosterStudent.model_validate(s) for s in students],
            courses=[CatalogCourse.model_validate(c) for c in courses],
            score_records=[ScoreRecord.model_validate(r) for r in records],
            report_filter=ReportFilter(class_id=class_id, term=term, academic_year=academic_year),
            ranking=RANKING_POLICIES[settings.REPORT_RANKING],
        )

    def export_class_report(
        self,
        class_id: int,
        term: str,
        academic_year: str,
        fmt: ReportFormat = ReportFormat.CSV,
    ) -> tuple[bytes, str]:
        """Render a class report; returns the file content and a download filename."""
        school_class = self._get_or_404(SchoolClass, class_id, "Class")
        report = self.generate_class_report(class_id, term, academic_year)

        filename = f"{school_class.name}_{term}_{academic_year}_Report".replace(" ", "_")
        if fmt is ReportFormat.XLSX:
            title = f"{school_class.name} - {term} {academic_year}"
            return report_to_xlsx(report, title=title), f"{filename}.xlsx"
        return report_to_csv(report).encode("utf-8"), f"{filename}.csv"

    # ==========================================
    # Helper Methods
    # ==========================================

    def _get_or_404(self, model, record_id: int, resource: str):
        """Fetch a row by primary key or raise NotFoundError."""
        record = self.db.get(model, record_id)
        if not record:
            raise NotFoundError(resource, str(record_id))
        return record

    def _get_existing_record(
        self, student_id: int, course_id: int, term: str, exam_type: str
    ) -> GradeRecord | None:
        """Check for existing grade record on the upsert key."""
        result = self.db.execute(
            select(GradeRecord).where(
                GradeRecord.student_id == student_id,
                GradeRecord.course_id == course_id,
                GradeRecord.term == term,
                GradeRecord.exam_type == exam_type,
            )
        )
        return result.scalar_one_or_none()

    def _get_students_by_class(self, class_id: int) -> list[Student]:
        """Get all students in a class ordered by name."""
        result = self.db.execute(
            select(Student)
            .where(Student.class_id == class_id)
            .order_by(Student.last_name, Student.first_name)
        )
        return list(result.scalars().all())

    def _get_student_records(self, student_id: int) -> list[GradeRecord]:
        result = self.db.execute(
            select(GradeRecord)
            .where(GradeRecord.student_id == student_id)
            .order_by(GradeRecord.id)
        )
        return list(result.scalars().all())
