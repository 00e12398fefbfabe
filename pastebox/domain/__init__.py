"""
Domain layer: object storage, access control and rendering decisions.
"""
