from fastapi import APIRouter, Depends, HTTPException
from app.api.v1.deps import get_current_user
from app.core.errors import NotFoundError
from app.models.caretaker import Caretaker
from app.models.user import User
from app.schemas.auth import MemberOut
from app.schemas.caretaker import AssignPatientIn, CaretakerOut
from app.services.directory import is_well_formed

router = APIRouter(prefix="/caretakers", tags=["caretakers"])


def _raise_not_found(message: str, code: str):
    err = NotFoundError(message, code=code)
    raise HTTPException(status_code=err.status_code, detail=err.to_dict())


def _patient_to_dict(u: User) -> dict:
    return {"id": str(u.id), "name": u.name, "email": u.email}


def _caretaker_to_dict(c: Caretaker, patients: list[User]) -> dict:
    return {
        "id": str(c.id),
        "name": c.name,
        "role": c.role,
        "status": c.status,
        "phone": c.phone,
        "email": c.email,
        "specialties": c.specialties or [],
        "initials": c.initials,
        "rating": c.rating,
        "experience": c.experience,
        "photo": c.photo,
        "patients": [_patient_to_dict(p) for p in patients],
    }


async def _get_caretaker_or_404(caretaker_id: str) -> Caretaker:
    c = await Caretaker.get_or_none(id=caretaker_id) if is_well_formed(caretaker_id) else None
    if not c:
        _raise_not_found("Caretaker not found", "CARETAKER_NOT_FOUND")
    return c


@router.get("", response_model=list[CaretakerOut], dependencies=[Depends(get_current_user)])
async def list_caretakers():
    """
    Caretaker directory with each caretaker's assigned patients.
    """
    rows = await Caretaker.all().order_by("name").prefetch_related("patients")
    return [_caretaker_to_dict(c, list(c.patients)) for c in rows]


@router.get("/{caretaker_id}/patients", response_model=list[MemberOut], dependencies=[Depends(get_current_user)])
async def list_patients(caretaker_id: str):
    """
    Patients assigned to one caretaker.

    Raises:
        HTTPException (404): CARETAKER_NOT_FOUND
    """
    c = await _get_caretaker_or_404(caretaker_id)
    patients = await c.patients.all().order_by("name")
    return [_patient_to_dict(p) for p in patients]


@router.post("/assign", dependencies=[Depends(get_current_user)])
async def assign_patient(body: AssignPatientIn):
    """
    Assign a patient to a caretaker. Assigning twice is a no-op.

    Raises:
        HTTPException (404): CARETAKER_NOT_FOUND or USER_NOT_FOUND
    """
    c = await _get_caretaker_or_404(body.caretakerId)
    patient = await User.get_or_none(id=body.patientId) if is_well_formed(body.patientId) else None
    if not patient:
        _raise_not_found("Patient not found", "USER_NOT_FOUND")
    if not await c.patients.filter(id=patient.id).exists():
        await c.patients.add(patient)
    return {"success": True, "data": {"caretakerId": str(c.id), "patientId": str(patient.id)}}
