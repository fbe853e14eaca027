#!/usr/bin/env python3
"""
Run script for the maternity coverage API.

Usage:
    python run_api.py

Settings come from environment variables or a .env file (see src/utils/config.py),
e.g. PORT=8000 DEBUG=true python run_api.py
"""

import logging
import os
import sys

# Quiet noisy libraries before anything imports them
logging.getLogger("python_multipart").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def main():
    """Run the API server."""
    import uvicorn
    from src.utils.config import settings

    base = f"http://{settings.host}:{settings.port}"
    print("=" * 60)
    print(settings.app_name)
    print("=" * 60)
    print(f"Server: {base}")
    print(f"Sample data: {'seeded' if settings.seed_sample_data else 'empty store'}")
    print()
    print("Endpoints:")
    print(f"  - Health: {base}/health")
    print(f"  - Dashboard: GET {base}/api/dashboard/user-1")
    print(f"  - Claims: GET {base}/api/claims/user-1, POST {base}/api/claims")
    print(f"  - Smart Contracts: GET {base}/api/smart-contracts/user-1")
    print(f"  - Docs: {base}/docs")
    print()

    uvicorn.run(
        "src.api.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
