"""
Module 09D - File Holder API (FastAPI)

HTTP API for the file-holder side of BlockProof:
- POST /upload - Store files
- GET /download/{name} - Serve a file
- GET /proof/{name} - Single inclusion proof
- POST /multiproof - Compact multiproof
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
