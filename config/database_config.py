"""Primary store configuration"""

import os
from dotenv import load_dotenv

# Load .env
load_dotenv()


class DatabaseConfig:
    """Connection settings for the annotation store"""

    HOST: str = os.getenv("ANNOTATOR_DB_HOST", "127.0.0.1")
    PORT: int = int(os.getenv("ANNOTATOR_DB_PORT", "3306"))
    DATABASE: str = os.getenv("ANNOTATOR_DB_DATABASE", "annotator")
    USER: str = os.getenv("ANNOTATOR_DB_USER", "root")
    PASSWORD: str = os.getenv("ANNOTATOR_DB_PASSWORD", "")
    CONNECT_TIMEOUT: int = int(os.getenv("ANNOTATOR_DB_CONNECT_TIMEOUT", "5"))

    TABLE: str = "annotations"

    @classmethod
    def get_connection_string(cls) -> dict:
        """Connection kwargs for pymysql.connect"""
        return {
            "host": cls.HOST,
            "port": cls.PORT,
            "database": cls.DATABASE,
            "user": cls.USER,
            "password": cls.PASSWORD,
            "connect_timeout": cls.CONNECT_TIMEOUT,
        }
