from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./rentals.db"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Identity: "supabase" or "firebase"
    AUTH_PROVIDER: str = "supabase"

    # Supabase Auth / PostgREST
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    SUPABASE_JWT_SECRET: Optional[str] = None

    # Firebase Auth
    FIREBASE_PROJECT_ID: Optional[str] = None

    # Rental persistence: "sqlalchemy" or "supabase"
    STORE_BACKEND: str = "sqlalchemy"

    # OpenAI (rent suggestions via LangChain)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    SUGGESTIONS_ENABLED: bool = True

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:9002",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def suggestions_available(self) -> bool:
        return self.SUGGESTIONS_ENABLED and bool(self.OPENAI_API_KEY)

settings = Settings()
