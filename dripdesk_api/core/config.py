# dripdesk_api/core/config.py
import os
from dotenv import load_dotenv

# Loads the .env file at the repository root, next to the dripdesk_api package.
env_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), '..', '.env')
load_dotenv(dotenv_path=env_path)

# Collections the record API serves. Anything else is answered with 404.
COLLECTIONS = (
    "clients",
    "contacts",
    "contact_lists",
    "contact_list_contacts",
    "templates",
    "pdf_templates",
    "campaigns",
)


class Settings:
    """
    Application settings read from environment variables.
    """
    def __init__(self):
        self.APP_BASE_URL: str = os.getenv("APP_BASE_URL", "http://127.0.0.1:8421")

        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./dripdesk.db")

        self.LOG_DIR: str = os.getenv(
            "LOG_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', '..', 'logs')
        )
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def database_path(self) -> str:
        """Resolves DATABASE_URL to a file path. Relative paths are taken from the repository root."""
        db_url = self.DATABASE_URL
        if not db_url.startswith("sqlite:///"):
            raise ValueError("DATABASE_URL must use the 'sqlite:///./path/to/your.db' format")
        path = db_url[len("sqlite:///"):]
        if path == ":memory:" or os.path.isabs(path):
            return path
        base_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
        return os.path.normpath(os.path.join(base_dir, path))


settings = Settings()
