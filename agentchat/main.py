from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import auth, chains, chat, export, health, personalities
from .config import settings
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

setup_logging()

# Create FastAPI app
app = FastAPI(
    title="Persona Web3 Chat API",
    description="Wallet-authenticated chat with persona-voiced Web3 tools",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestLoggingMiddleware)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, tags=["Auth"])
app.include_router(chat.router, tags=["Chat"])
app.include_router(personalities.router, tags=["Personalities"])
app.include_router(chains.router, tags=["Chains"])
app.include_router(export.router, tags=["Export"])


@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "Persona Web3 Chat API",
        "version": "0.1.0",
        "description": "Wallet-authenticated chat with persona-voiced Web3 tools",
        "docs": "/docs",
        "health": "/healthz"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "agentchat.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower()
    )
