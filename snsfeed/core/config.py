import os

# ======== database ========
DB_HOST = os.getenv("SNSFEED_DB_HOST", "127.0.0.1")
DB_PORT = int(os.getenv("SNSFEED_DB_PORT", "3306"))
DB_USER = os.getenv("SNSFEED_DB_USER", "root")
DB_PASSWORD = os.getenv("SNSFEED_DB_PASSWORD", "")
DB_NAME = os.getenv("SNSFEED_DB_NAME", "snsfeed")

DATABASE_URL = os.getenv(
    "SNSFEED_DATABASE_URL",
    f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}?charset=utf8mb4",
)
SQL_ECHO = os.getenv("SNSFEED_SQL_ECHO", "0") == "1"

# ======== generation service ========
AI_SERVER_URL = os.getenv("SNSFEED_AI_SERVER_URL", "http://127.0.0.1:8000")
AI_TIMEOUT_SECONDS = float(os.getenv("SNSFEED_AI_TIMEOUT", "30"))

# ======== side effects ========
POST_COMMIT_WORKERS = int(os.getenv("SNSFEED_POST_COMMIT_WORKERS", "4"))
# a bot post is generated every N non-bot posts on a board
BOT_POST_EVERY = int(os.getenv("SNSFEED_BOT_POST_EVERY", "5"))
# how many recent posts the bot reads before writing its own
BOT_POST_SCAN = 10
BOT_POST_CONTEXT = 5

DEBUG = os.getenv("SNSFEED_DEBUG", "0") == "1"
