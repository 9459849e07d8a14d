#!/usr/bin/env python3
"""
Run script for the Connexa API
"""
import uvicorn

from connexa.config.settings import settings

if __name__ == "__main__":
    uvicorn.run(
        "connexa.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
