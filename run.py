"""
Run the API server on port 8080.
Usage: python3 run.py   (from the repository root)
"""
import uvicorn

from config import settings

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8080,
        reload=settings.debug,
        log_config=None,
    )
