from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./database.db"
    cors_origin: str = "http://localhost:3000"
    auth_realm: str = "Svalutation"
    log_level: str = "INFO"
    create_tables: bool = True

    class Config:
        env_file = ".env"


settings = Settings()
