from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.auth_dependencies import require_admin
from app.core.database import get_db
from app.schemas.business_schema import ApprovalOut, ApprovalUpdate, BusinessSummaryOut
from app.services import admin

# todas as rotas exigem sessão de admin
router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


@router.get("/businesses", response_model=List[BusinessSummaryOut])
def list_businesses(db: Session = Depends(get_db)):
    return admin.list_businesses(db)


@router.put("/businesses/{business_id}/approve", response_model=ApprovalOut)
def set_approval(business_id: UUID, payload: ApprovalUpdate, db: Session = Depends(get_db)):
    return admin.set_approval(db, business_id, payload.is_approved)
