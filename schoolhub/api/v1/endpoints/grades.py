"""Grade management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from schoolhub.core.database import get_db
from schoolhub.schemas.common import ErrorResponse, MessageResponse
from schoolhub.schemas.grade import (
    AcademicSummary,
    ClassGradesResponse,
    CourseGradesResponse,
    GradeFormData,
    GradeRecordCreate,
    GradeRecordResponse,
    StudentGradesResponse,
)
from schoolhub.services.grade import GradeService

router = APIRouter(responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}})


@router.post("", response_model=GradeRecordResponse)
def upsert_grade(
    request: GradeRecordCreate,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Record a grade.
    Percentage and letter grade are computed from score and max score;
    an existing grade for the same student, course, term and exam type is updated.
    """
    service = GradeService(db)
    return service.upsert_grade(request)


@router.get("/form-data", response_model=GradeFormData)
def get_grade_form_data(
    db: Annotated[Session, Depends(get_db)],
):
    """Exam types, terms and the current academic year."""
    service = GradeService(db)
    return service.get_grade_form_data()


@router.get("/students/{student_id}", response_model=StudentGradesResponse)
def get_student_grades(
    student_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """All grades of a student grouped by academic year and term."""
    service = GradeService(db)
    return service.get_student_grades(student_id)


@router.get("/students/{student_id}/summary", response_model=AcademicSummary)
def get_student_academic_summary(
    student_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Latest term average and its trend against the previous term."""
    service = GradeService(db)
    return service.get_student_academic_summary(student_id)


@router.get("/classes/{class_id}", response_model=ClassGradesResponse)
def get_class_grades(
    class_id: int,
    db: Annotated[Session, Depends(get_db)],
    course_id: int | None = None,
    term: str | None = None,
):
    """Class roster with each student's grades grouped by course."""
    service = GradeService(db)
    return service.get_class_grades(class_id, course_id, term)


@router.get("/courses/{course_id}", response_model=CourseGradesResponse)
def get_course_grades(
    course_id: int,
    db: Annotated[Session, Depends(get_db)],
    class_id: int | None = None,
    term: str | None = None,
):
    """Grades of a course grouped by class and term."""
    service = GradeService(db)
    return service.get_course_grades(course_id, class_id, term)


@router.get("/{grade_id}", response_model=GradeRecordResponse)
def get_grade(
    grade_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Get a grade record by ID."""
    service = GradeService(db)
    return service.get_grade(grade_id)


@router.delete("/{grade_id}", response_model=MessageResponse)
def delete_grade(
    grade_id: int,
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a grade record."""
    service = GradeService(db)
    service.delete_grade(grade_id)
    return MessageResponse(message="Grade record deleted successfully")
