"""
Service layer for business logic.

Note: the credential provider is not re-exported here because only the
startup pipeline uses it. Import it directly:
- from services.secrets_service import SecretsManagerCredentialProvider
"""
from services.patient_service import PatientService

__all__ = [
    "PatientService",
]
