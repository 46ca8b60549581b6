from fastapi import APIRouter

from sports_admin.api import auth, events, houses, leaderboard, students, system

api_router = APIRouter()
api_router.include_router(system.router)
api_router.include_router(auth.router)
api_router.include_router(students.router)
api_router.include_router(events.router)
api_router.include_router(houses.router)
api_router.include_router(leaderboard.router)
