# workhub/schemas/weekly_report.py
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator


class WeeklyReportCreate(BaseModel):
    # progress bounds are enforced by the model, not here
    project_id: int
    week_start: date
    week_end: date
    summary: str
    progress_percentage: int = 0
    team_performance: str = ""
    issues_faced: str = ""
    next_week_plan: str = ""

    @model_validator(mode="after")
    def check_week(self):
        if self.week_end < self.week_start:
            raise ValueError("week_end must not be before week_start")
        return self


class WeeklyReportUpdate(BaseModel):
    summary: Optional[str] = None
    progress_percentage: Optional[int] = None
    team_performance: Optional[str] = None
    issues_faced: Optional[str] = None
    next_week_plan: Optional[str] = None


class WeeklyReport(BaseModel):
    id: int
    manager_id: int
    project_id: int
    week_start: datetime
    week_end: datetime
    week_number: Optional[int] = None
    summary: str
    progress_percentage: int
    team_performance: str
    issues_faced: str
    next_week_plan: str
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
