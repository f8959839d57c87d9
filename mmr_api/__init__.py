"""
Module 09D - Minimal API (FastAPI)

HTTP API over one process-wide Merkle Mountain Range:
- POST /append - Append a value digest
- GET /root - Current root, width and size
- GET /peaks - Current peaks
- GET /nodes/{index} - Stored node hash
- GET /proofs/{leaf_index} - Inclusion proof
- POST /verify - Stateless proof verification
- GET /health - Health check

Usage:
    uvicorn mmr_api.app:app --reload
"""

__version__ = "0.1.0"
