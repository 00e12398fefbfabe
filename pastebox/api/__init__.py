"""
API Layer

Plain paste routes and the versioned JSON API.
"""
