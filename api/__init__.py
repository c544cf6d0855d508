"""
HTTP layer: routers for the patient and probe endpoints.
"""
