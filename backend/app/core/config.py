import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # "memory" keeps the directory in process, "cosmos" uses Azure Cosmos DB
    DIRECTORY_BACKEND: str = "memory"

    COSMOS_DB_ENDPOINT: str = ""
    COSMOS_DB_KEY: str = ""
    COSMOS_DB_DATABASE: str = "hr-portal"
    COSMOS_DB_EMPLOYEES_CONTAINER: str = "employees"

    AUTH_SECRET_KEY: str = ""
    AUTH_ALGORITHM: str = "HS256"
    AUTH_ISSUER: str = "hr-portal"
    AUTH_AUDIENCE: str = "hr-portal-api"

    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    DEFAULT_EMPLOYEE_ROLE: str = "MANAGER"
    DEFAULT_EMPLOYEE_STATUS: str = "Active"

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


settings = Settings()
