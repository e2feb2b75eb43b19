from dotenv import load_dotenv
import os

load_dotenv()

# MongoDB
MONGO_URI = os.getenv("MONGO_URI")
MONGO_DB = os.getenv("MONGO_DB", "rajaoil")

# The root collection holds the configuration document ("others")
# and the products, one document per product name.
ROOT_COLLECTION = os.getenv("ROOT_COLLECTION", "rajaoil")
CONFIG_DOCUMENT_ID = os.getenv("CONFIG_DOCUMENT_ID", "others")
ORDERS_COLLECTION = os.getenv("ORDERS_COLLECTION", "orders")
CONTACT_FORMS_COLLECTION = os.getenv("CONTACT_FORMS_COLLECTION", "contactForm")

# Object storage (GridFS)
MEDIA_BUCKET = os.getenv("MEDIA_BUCKET", "media")
MEDIA_PREFIX = os.getenv("MEDIA_PREFIX", "rajaoil")
MEDIA_BASE_URL = os.getenv("MEDIA_BASE_URL", "http://localhost:8000/api/media").rstrip("/")
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))

# CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# Single admin account
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
SECRET_KEY = os.getenv("SECRET_KEY", "your-secret-key-change-this-in-production")
SESSION_DURATION_HOURS = int(os.getenv("SESSION_DURATION_HOURS", "2"))

# Order listing
DEFAULT_ORDER_LIMIT = int(os.getenv("DEFAULT_ORDER_LIMIT", "50"))
MAX_ORDER_LIMIT = int(os.getenv("MAX_ORDER_LIMIT", "500"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
