"""
Dormitory API - FastAPI layer over the dormitory assignment engine.
"""
