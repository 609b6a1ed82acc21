from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class BizResponse(JSONResponse):
    """
    Uniform response envelope: {"code": <http status>, "msg": ..., "data": ...}
    """

    def __init__(self, data: Any = None, msg: Optional[str] = "ok", status_code: int = 200, **kwargs):
        content = {
            "code": status_code,
            "msg": msg,
            "data": jsonable_encoder(data),
        }
        super().__init__(content=content, status_code=status_code, **kwargs)
