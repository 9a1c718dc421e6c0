from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.db.dependency import get_db
from app.errors import ValidationError
from app.models.user import User
from app.schemas.report import AIReportRequest, AIReportResponse, CategoryTotal, MonthlySummaryRow
from app.services import reports
from app.utils.ai_webhook import AIWebhookClient, get_report_client
from app.utils.auth import get_current_user

router = APIRouter()

@router.get("/expenses-by-category", response_model=List[CategoryTotal])
def expenses_by_category(
    start_date: date = Query(...),
    end_date: date = Query(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if start_date > end_date:
        raise ValidationError("start_date must not be after end_date")
    return reports.expenses_by_category(db, current_user.id, start_date, end_date)

@router.get("/monthly-summary", response_model=List[MonthlySummaryRow])
def monthly_summary(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return reports.monthly_summary(db, current_user.id, year or date.today().year)

@router.get("/export")
def export_transactions(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    csv_text = reports.export_transactions_csv(db, current_user.id)
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="transactions.csv"'},
    )

@router.post("/ai", response_model=AIReportResponse)
def ai_report(
    payload: AIReportRequest,
    current_user: User = Depends(get_current_user),
    client: AIWebhookClient = Depends(get_report_client),
):
    output = client.send({"question": payload.question, "userId": current_user.id})
    return {"output": output}
