import os

from rajaoil_admin.main import app

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run("rajaoil_admin.main:app", host="0.0.0.0", port=port, reload=True)
