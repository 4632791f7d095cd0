"""
HomeHub HTTP API (FastAPI).
"""
