# workhub/api/v1/endpoints/weekly_reports.py
import logging
from datetime import date, datetime, timezone
from html import escape
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from workhub.api.deps import ensure_project_access, get_project_or_404, record_activity
from workhub.core import security
from workhub.core.context import AppContext, get_context
from workhub.db import models
from workhub.db.models import ReportStatus, Role
from workhub.db.session import get_db
from workhub.schemas import weekly_report as report_schema
from workhub.schemas.user import AuthUser
from workhub.services.audit import AuditService

logger = logging.getLogger(__name__)

router = APIRouter()

require_manager = security.require_roles(Role.ADMIN, Role.MANAGER)


def _day_start(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def _get_report_or_404(db: Session, report_id: int) -> models.WeeklyReport:
    report = db.get(models.WeeklyReport, report_id)
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Weekly report not found")
    return report


def _get_own_report(db: Session, report_id: int, user: AuthUser) -> models.WeeklyReport:
    report = _get_report_or_404(db, report_id)
    if report.manager_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only the author can change this report")
    if report.status != ReportStatus.DRAFT.value:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Report has already been submitted")
    return report


def render_report_email(report: models.WeeklyReport, author: str, project: str) -> str:
    return (
        f"<h2>Weekly report: {escape(project)}</h2>"
        f"<p><b>{escape(author)}</b> submitted the report for week {report.week_number} "
        f"({report.week_start:%Y-%m-%d} to {report.week_end:%Y-%m-%d}).</p>"
        f"<p>Progress: {report.progress_percentage}%</p>"
        f"<p>{escape(report.summary)}</p>"
    )


@router.post("", response_model=report_schema.WeeklyReport, status_code=status.HTTP_201_CREATED)
def create_report(
    report_in: report_schema.WeeklyReportCreate,
    request: Request,
    db: Session = Depends(get_db),
    manager: AuthUser = Depends(require_manager),
):
    """ Saves a draft weekly report for a project the manager works on. """
    project = get_project_or_404(db, report_in.project_id)
    ensure_project_access(project, manager)

    fields = report_in.model_dump(exclude={"week_start", "week_end"})
    try:
        report = models.WeeklyReport(
            manager_id=manager.id,
            week_start=_day_start(report_in.week_start),
            week_end=_day_start(report_in.week_end),
            week_number=report_in.week_start.isocalendar()[1],
            **fields,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    db.add(report)
    db.flush()
    AuditService.log_action(
        db, action="create", entity_type="weekly_report", entity_id=report.id, user_id=manager.id,
        new_values={"project_id": report.project_id, "progress_percentage": report.progress_percentage},
        request=request,
    )
    db.refresh(report)
    return report


@router.get("", response_model=List[report_schema.WeeklyReport])
def list_reports(
    project_id: Optional[int] = None,
    report_status: Optional[ReportStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    manager: AuthUser = Depends(require_manager),
):
    """ Admins see every report, managers only their own. """
    query = db.query(models.WeeklyReport)
    if manager.role != Role.ADMIN:
        query = query.filter(models.WeeklyReport.manager_id == manager.id)
    if project_id is not None:
        query = query.filter(models.WeeklyReport.project_id == project_id)
    if report_status is not None:
        query = query.filter(models.WeeklyReport.status == report_status.value)
    return query.order_by(models.WeeklyReport.week_start.desc(), models.WeeklyReport.id.desc()).all()


@router.get("/{report_id}", response_model=report_schema.WeeklyReport)
def get_report(
    report_id: int,
    db: Session = Depends(get_db),
    manager: AuthUser = Depends(require_manager),
):
    """ Managers can only open their own reports. """
    report = _get_report_or_404(db, report_id)
    if manager.role != Role.ADMIN and report.manager_id != manager.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return report


@router.patch("/{report_id}", response_model=report_schema.WeeklyReport)
def update_report(
    report_id: int,
    updates: report_schema.WeeklyReportUpdate,
    db: Session = Depends(get_db),
    manager: AuthUser = Depends(require_manager),
):
    report = _get_own_report(db, report_id, manager)
    try:
        for field, value in updates.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(report, field, value)
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))
    db.commit()
    db.refresh(report)
    return report


@router.post("/{report_id}/submit", response_model=report_schema.WeeklyReport)
def submit_report(
    report_id: int,
    request: Request,
    db: Session = Depends(get_db),
    context: AppContext = Depends(get_context),
    manager: AuthUser = Depends(require_manager),
):
    """
    Moves a draft to SUBMITTED and e-mails every admin. A mail failure
    aborts the request before the status change is committed.
    """
    report = _get_own_report(db, report_id, manager)
    report.status = ReportStatus.SUBMITTED.value

    admins = db.query(models.User).filter(models.User.role == Role.ADMIN.value).all()
    html = render_report_email(report, manager.name, report.project.name)
    for admin in admins:
        context.mailer.send_email(
            to=admin.email,
            subject=f"Weekly report submitted: {report.project.name}",
            html=html,
        )

    record_activity(db, report.project_id, "weekly_report_submitted", f"Week {report.week_number} report submitted")
    AuditService.log_action(
        db, action="submit", entity_type="weekly_report", entity_id=report.id, user_id=manager.id,
        old_values={"status": ReportStatus.DRAFT.value}, new_values={"status": ReportStatus.SUBMITTED.value},
        request=request,
    )
    logger.info("Weekly report %s submitted, %d admin(s) e-mailed", report.id, len(admins))
    db.refresh(report)
    return report


@router.delete("/{report_id}")
def delete_report(
    report_id: int,
    request: Request,
    db: Session = Depends(get_db),
    manager: AuthUser = Depends(require_manager),
):
    """ Admins may delete any report; managers only their own drafts. """
    report = _get_report_or_404(db, report_id)
    if manager.role != Role.ADMIN:
        if report.manager_id != manager.id:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        if report.status == ReportStatus.SUBMITTED.value:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Cannot delete a submitted report. Contact an admin.",
            )

    old_values = {"project_id": report.project_id, "status": report.status}
    db.delete(report)
    AuditService.log_action(
        db, action="delete", entity_type="weekly_report", entity_id=report_id, user_id=manager.id,
        old_values=old_values, request=request,
    )
    return {"success": True, "message": "Report removed"}
