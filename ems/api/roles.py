from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ems.db.session import get_db
from ems.models.rbac import Role

router = APIRouter(prefix="/roles", tags=["roles"])


@router.get("")
def list_roles(db: Session = Depends(get_db)):
    rows = db.query(Role).order_by(Role.name.asc()).all()
    return [{"id": r.id, "name": r.name} for r in rows]
