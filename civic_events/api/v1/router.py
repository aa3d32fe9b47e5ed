# civic_events/api/v1/router.py
from fastapi import APIRouter
from civic_events.api.v1 import auth, people, events, enrollments

api_router = APIRouter()

api_router.include_router(auth.router,        prefix="/auth",   tags=["auth"])
api_router.include_router(people.router,      prefix="/people", tags=["people"])
api_router.include_router(events.router,      prefix="/events", tags=["events"])
# /events/{id}/enrollments e /people/me/enrollments
api_router.include_router(enrollments.router,                   tags=["enrollments"])
