"""Class report endpoints."""

from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from schoolhub.analytics.reports import Report
from schoolhub.core.database import get_db
from schoolhub.schemas.common import ErrorResponse
from schoolhub.schemas.report import ReportFormat
from schoolhub.services.grade import GradeService

router = APIRouter(responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}})

AcademicYearQuery = Annotated[str, Query(pattern=r"^\d{4}-\d{4}$", examples=["2023-2024"])]


@router.get("/classes/{class_id}", response_model=Report)
def get_class_report(
    class_id: int,
    term: str,
    academic_year: AcademicYearQuery,
    db: Annotated[Session, Depends(get_db)],
):
    """Ranked Final Exam report of a class for a term."""
    service = GradeService(db)
    return service.generate_class_report(class_id, term, academic_year)


@router.get("/classes/{class_id}/download")
def download_class_report(
    class_id: int,
    term: str,
    academic_year: AcademicYearQuery,
    db: Annotated[Session, Depends(get_db)],
    fmt: Annotated[ReportFormat, Query(alias="format")] = ReportFormat.CSV,
):
    """Download the class report as CSV or Excel."""
    service = GradeService(db)
    content, filename = service.export_class_report(class_id, term, academic_year, fmt)

    return StreamingResponse(
        BytesIO(content),
        media_type=fmt.media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
