from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dessert_optimizer.api.v1.router import router as v1_router
from dessert_optimizer.core.config import Settings, get_settings
from dessert_optimizer.core.errors import DomainError
from dessert_optimizer.core.logging_config import configure_logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Dessert Optimizer API", version="0.1.0")
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DomainError)
    def domain_error_handler(_, exc: DomainError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    app.include_router(v1_router, prefix="/v1")
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "dessert_optimizer.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.reload,
    )


app = create_app()

if __name__ == "__main__":  # pragma: no cover
    run()
