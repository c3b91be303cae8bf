#!/usr/bin/env python
"""Script to run the Taskboard API server."""
import sys
import os
from pathlib import Path

# Get the directory where this script is located
project_dir = Path(__file__).resolve().parent

# Add project directory to Python path
sys.path.insert(0, str(project_dir))

# Change to project directory so relative SQLite paths resolve here
os.chdir(project_dir)

# Now run uvicorn
import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "taskboard.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=True
    )
