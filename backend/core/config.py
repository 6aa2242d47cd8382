import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    database_url: str = os.getenv(
        "DATABASE_URL",
        "sqlite+aiosqlite:///./inventory.db"
    )
    database_echo: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Receipts / reports
    default_language: str = os.getenv("DEFAULT_LANGUAGE", "en").lower()
    # TTF with Arabic glyphs (e.g. DejaVuSans.ttf); Helvetica when unset
    pdf_font_path: str = os.getenv("PDF_FONT_PATH", "")
    establishment_name: str = os.getenv("ESTABLISHMENT_NAME", "")


settings = Settings()
