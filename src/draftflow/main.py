"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from draftflow.config import settings
from draftflow.api.routes.draft import router as draft_router


app = FastAPI(
    title="DraftFlow",
    description="Composition checks and possibility trees for LoL drafts",
    version="0.1.0",
    debug=settings.debug,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "draftflow"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "DraftFlow API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(draft_router)
