"""
Domain models for the patient service.
"""
from models.patient import Patient, metadata, patients

__all__ = ["Patient", "metadata", "patients"]
