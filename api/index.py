from mangum import Mangum
import os
import sys

# Vercel runs this file from api/; the project root must be importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from rajaoil_admin.main import app  # noqa: E402

# Handler for Vercel / AWS Lambda
handler = Mangum(app)
