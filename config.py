import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./transactions.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8080)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", 0))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Transaction cache (one instance per cache name, shared settings)
    CACHE_INITIAL_CAPACITY = data.get("CACHE_INITIAL_CAPACITY", 200)
    CACHE_MAXIMUM_SIZE = data.get("CACHE_MAXIMUM_SIZE", 10000)
    CACHE_EXPIRE_AFTER_WRITE_MINUTES = data.get("CACHE_EXPIRE_AFTER_WRITE_MINUTES", 30)
    CACHE_EXPIRE_AFTER_ACCESS_MINUTES = data.get("CACHE_EXPIRE_AFTER_ACCESS_MINUTES", 10)

    # Pagination
    PAGE_SIZE_DEFAULT = data.get("PAGE_SIZE_DEFAULT", 20)
    PAGE_SIZE_MAX = data.get("PAGE_SIZE_MAX", 100)
