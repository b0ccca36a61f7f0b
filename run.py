"""
Run the intake relay API (default port 3005).
Usage: python3 run.py   (from the project root)
"""
import os

import uvicorn
from dotenv import load_dotenv

# HOST / PORT may live in .env alongside the app settings
load_dotenv()

from config import settings  # noqa: E402

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3005")),
        reload=settings.debug,
    )
