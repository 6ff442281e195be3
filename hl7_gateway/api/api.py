from fastapi import APIRouter
from .endpoints import fhir, hl7, system

api_router = APIRouter()

api_router.include_router(system.router, tags=["System"])
api_router.include_router(hl7.router, tags=["HL7 Conversion"])
api_router.include_router(fhir.router, prefix="/fhir", tags=["FHIR Proxy"])
