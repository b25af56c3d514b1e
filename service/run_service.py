#!/usr/bin/env python3
"""
Startup script for the Agent Execution Service.

Usage:
    python service/run_service.py
    # or
    uvicorn service.app:create_app --factory --host 0.0.0.0 --port 8005
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn

from config.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "service.app:create_app",
        factory=True,
        host=settings.service_host,
        port=settings.service_port,
        reload=True,  # Enable auto-reload for development
    )
