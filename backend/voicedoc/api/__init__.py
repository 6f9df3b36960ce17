# Router aggregator – import each route module here and expose ``api_router``
# for convenient inclusion in the FastAPI app.

from fastapi import APIRouter

from . import routes_status, routes_summarize

api_router = APIRouter()
api_router.include_router(routes_status.router, tags=["status"])
api_router.include_router(routes_summarize.router, tags=["summarize"])
