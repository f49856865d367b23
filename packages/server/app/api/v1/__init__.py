"""
API v1 Router

Resource endpoints take the record id as a query parameter (``?id=``) rather
than a path segment; team endpoints use ``?userId=``.
"""

from fastapi import APIRouter
from . import budgets, dashboard, invoices, notes, profiles, tasks, team

router = APIRouter()

router.include_router(budgets.router, prefix="/budgets", tags=["Budgets"])
router.include_router(invoices.router, prefix="/invoices", tags=["Invoices"])
router.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
router.include_router(notes.router, prefix="/notes", tags=["Notes"])
router.include_router(team.router, prefix="/team", tags=["Team"])
router.include_router(profiles.router, prefix="/profiles", tags=["Profiles"])
router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
