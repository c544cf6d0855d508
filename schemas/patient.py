"""
Pydantic schemas for patient-related API operations.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class PatientWrite(BaseModel):
    """Request body for creating or updating a patient.

    Both fields are optional at the schema level so that a missing field
    reaches the service's presence check and produces the same 400 message
    as an empty one.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Jane Doe",
                "patientNumber": "P-1001"
            }
        },
    )

    name: Optional[StrictStr] = Field(
        None,
        description="Patient full name",
        examples=["Jane Doe"],
    )
    patient_number: Optional[StrictStr] = Field(
        None,
        alias="patientNumber",
        description="Patient number (not required to be unique)",
        examples=["P-1001"],
    )


class PatientResponse(BaseModel):
    """A stored patient."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique patient identifier", examples=[1])
    name: str = Field(..., description="Patient full name", examples=["Jane Doe"])
    patient_number: str = Field(..., description="Patient number", examples=["P-1001"])


class PatientListResponse(BaseModel):
    """All patients, ordered by id."""

    patients: List[PatientResponse]


class MessageResponse(BaseModel):
    message: str = Field(..., examples=["Patient updated successfully."])


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""

    error: str = Field(..., examples=["Patient not found."])
