"""
staffboard.api.v1.endpoints - API v1 Endpoint Modules
"""
