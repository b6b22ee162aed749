"""
API Routers - Organized endpoint handlers for the Dormitory API.

Each router handles a specific domain:
- dormitory: Preview dormitory assignments for a retreat
"""
