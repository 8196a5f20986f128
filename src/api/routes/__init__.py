"""
API Routes - HTTP endpoint handlers

Each area (roles, components, system) gets its own router, included in the
main app under /api/v1.
"""
