"""
Main application entry point.
"""

import logging
import os

from fastapi import FastAPI

from app.api.v1.authors_endpoints import router as authors_router
from app.api.v1.books_endpoints import router as books_router
from app.api.v1.errors import register_exception_handlers

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Author Book Catalog API",
    description="Authors and books in a many-to-many catalog with filtered search.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

register_exception_handlers(app)

# Include API routers
app.include_router(authors_router, prefix="/api/v1", tags=["authors"])
app.include_router(books_router, prefix="/api/v1", tags=["books"])


@app.get("/")
def read_root():
    """Root endpoint."""
    return {
        "message": "Welcome to the Author Book Catalog API",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
