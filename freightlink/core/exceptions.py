# freightlink/core/exceptions.py
from fastapi import HTTPException, status


class ShipmentError(HTTPException):
    """Base class for shipment lifecycle errors"""
    error_code = "shipment_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(status_code=self.status_code, detail=detail)


class ShipmentValidationError(ShipmentError):
    error_code = "validation_error"
    status_code = 422


class ShipmentNotFoundError(ShipmentError):
    error_code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, shipment_id: int):
        super().__init__(f"Shipment {shipment_id} not found")


class RequestNotFoundError(ShipmentError):
    error_code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, shipment_id: int, request_id: int):
        super().__init__(f"Request {request_id} not found on shipment {shipment_id}")


class RequestConflictError(ShipmentError):
    error_code = "conflict"
    status_code = status.HTTP_409_CONFLICT


class ShipmentStateError(ShipmentError):
    error_code = "state_error"
    status_code = status.HTTP_409_CONFLICT
