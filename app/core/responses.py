from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

def success_response(data: Any = None, message: str = "Success", status_code: int = 200, **extra) -> JSONResponse:
    body = {"success": True, "message": message, "data": data}
    body.update(extra)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))

def error_response(message: str = "Error", status_code: int = 400, errors: Optional[Any] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({"success": False, "message": message, "errors": errors}),
    )
