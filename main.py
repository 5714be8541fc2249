from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
import logging

from db import Base, engine
from matching.models import University, UserPreferences, SavedMatch  # noqa: F401  registers tables
from matching.routes import router as matching_router, universities_router
from preferences_routes import router as preferences_router
from saved_matches_routes import router as saved_matches_router
from dotenv import load_dotenv

load_dotenv()

logging.basicConfig(level=logging.INFO)
logging.info("App starting with DATABASE_URL")

app = FastAPI(title="University Matching API")

CORS_ALLOW_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Base.metadata.create_all(bind=engine)

app.include_router(matching_router)
app.include_router(universities_router)
app.include_router(preferences_router)
app.include_router(saved_matches_router)


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok"}
