# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Wellnest Messaging API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # Logging level for the uvicorn.error logger
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Optional JSON file with the caretaker directory, loaded once on an empty table
    caretaker_seed_path: str | None = os.getenv("CARETAKER_SEED_PATH")

    # Optional JSON file with the games catalog, loaded the same way
    games_seed_path: str | None = os.getenv("GAMES_SEED_PATH")

settings = Settings()  # Instantiate configuration
