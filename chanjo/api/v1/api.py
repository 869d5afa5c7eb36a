from fastapi import APIRouter

from chanjo.api.v1.endpoints import babies
from chanjo.api.v1.endpoints import vaccination_schedule
from chanjo.reminders import api as reminders_api

api_router = APIRouter()

api_router.include_router(babies.router, prefix="/baby", tags=["babies"])
api_router.include_router(vaccination_schedule.router, prefix="/vaccination-schedule", tags=["vaccination-schedule"])
api_router.include_router(reminders_api.router, tags=["reminders"])
