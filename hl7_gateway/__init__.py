"""HL7 v2 to FHIR gateway package.

Forwards HL7 conversion requests and FHIR REST queries to an upstream EMR
service and normalizes upstream failures into a fixed JSON error shape.
"""

__all__ = [
    "config",
    "emr_http_client",
    "models",
    "services",
]
