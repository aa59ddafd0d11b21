from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderpack import config
from orderpack.routes import packing_routes, tasks_routes

app = FastAPI(title="orderpack")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(packing_routes, prefix="/packing")
app.include_router(tasks_routes, prefix="/tasks")
