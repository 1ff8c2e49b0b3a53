from fastapi import APIRouter
from capacity_ledger.api.routers import capacity, ledger, assignments

api_router = APIRouter()
api_router.include_router(capacity.router, prefix="/capacity", tags=["capacity"])
api_router.include_router(ledger.router, prefix="/ledger", tags=["ledger"])
api_router.include_router(assignments.router, prefix="/assignments", tags=["assignments"])
