from fastapi import APIRouter

router = APIRouter()

@router.get("/")
def root():
    return {
        "name": "Employee Management Backend",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
    }
