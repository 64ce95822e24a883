# runtime settings, read once from the environment
import os

DB_PATH = os.getenv("SHOP_DB_PATH", "data/shop.sqlite")

# seconds a writer waits for the database write lock before giving up
DB_TIMEOUT = float(os.getenv("SHOP_DB_TIMEOUT", "10"))

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

DEBUG = bool(os.getenv("DEBUG"))
