# marketplace/api/__init__.py
from fastapi import HTTPException

from marketplace.domain.errors import MarketplaceError


def http_error(e: MarketplaceError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
