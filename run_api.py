"""
Run the Settings Menu Agent REST API.

Usage:
    python run_api.py

Environment variables: see run_cli.py.
"""

import sys
from pathlib import Path

# Ensure src/ is importable when running from a checkout
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "adapters.rest.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
