"""Production entry point for DriveDoc using uvicorn"""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

if __name__ == "__main__":
    PORT = int(os.getenv("PORT", "5000"))
    HOST = os.getenv("HOST", "0.0.0.0")
    ENVIRONMENT = os.getenv("ENVIRONMENT", "production").lower()

    print(f"Starting DriveDoc API in {ENVIRONMENT} mode...")
    print(f"Host: {HOST}, Port: {PORT}")

    # Single worker: the expiry notifier runs inside the app process
    uvicorn.run(
        "web.main:create_production_app",
        factory=True,
        host=HOST,
        port=PORT,
        workers=1,
        log_level="info",
        access_log=True,
    )
