"""
API package for the AI App Catalog.

Run with:
    uvicorn api.main:app --reload
"""
