from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config.settings import get_settings
from api import state
from api.routers import dashboard, ingestion
from logshield.utils.logger import log

settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description="Security log ingestion, attack signature classification and risk scoring",
    version="1.0.0"
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # For demo purposes
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include Routers
app.include_router(ingestion.router)
app.include_router(dashboard.router)

@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "records": len(state.history),
        "live_feed": state.live_feed.live,
    }

@app.on_event("startup")
async def startup_event():
    log.info(f"Starting {settings.APP_NAME}...")
    if settings.LIVE_FEED_ENABLED:
        state.live_feed.start()

@app.on_event("shutdown")
async def shutdown_event():
    state.live_feed.stop()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
