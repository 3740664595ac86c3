from dotenv import load_dotenv
import os


load_dotenv()

class Settings:
    QUANDL_API_KEY = os.getenv("QUANDL_API_KEY")
    QUANDL_BASE_URL = os.getenv("QUANDL_BASE_URL", "https://www.quandl.com")
    QUANDL_TIMEOUT = float(os.getenv("QUANDL_TIMEOUT", 60))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
