from fastapi import APIRouter

from . import articles, auth, categories, dashboard, employees, tags

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(articles.router, prefix="/articles", tags=["articles"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])
