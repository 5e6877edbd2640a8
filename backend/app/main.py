import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import ai
from app.core.config import settings

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Co-purchase recommendations and cashback reminders for the storefront",
    version="0.1.0",
)

# CORS - restrict in production via env
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # TODO: restrict to the storefront and admin origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(ai.router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "version": "0.1.0"}
