#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Settings come from the environment or backend/.env.
"""
from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    print("Starting booking service at http://localhost:8000 (docs at /docs)")
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
