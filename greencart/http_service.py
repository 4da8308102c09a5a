from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api_server import error_body, router
from .database import init_db
from .errors import InvalidParameters
from .schemas import validation_details


def create_app(*, create_tables: bool = True) -> FastAPI:
    app = FastAPI(
        title="GreenCart Simulation Service",
        description="Delivery simulation engine HTTP wrapper",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 422 → 400 with the offending camelCase field names
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        fields, messages = validation_details(exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(
                "Validation failed",
                invalid_fields=fields,
                errors=messages,
                code=InvalidParameters.__name__,
            ),
        )

    app.include_router(router)

    if create_tables:
        init_db()

    return app
