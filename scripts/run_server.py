"""
Start the FastAPI server
"""
import uvicorn
import sys
import os

# project root on sys.path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import get_settings

if __name__ == "__main__":
    settings = get_settings()
    print("=" * 60)
    print(f"Starting {settings.APP_NAME} API server")
    print("=" * 60)
    print()
    print(f"API:  http://localhost:{settings.API_PORT}")
    print(f"Docs: http://localhost:{settings.API_PORT}/docs")
    print()
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
