from fastapi import APIRouter, Request

from dessert_optimizer.api.v1.solve import router as solve_router

router = APIRouter()


@router.get("/health")
def health(request: Request) -> dict:
    settings = request.app.state.settings
    return {
        "status": "ok",
        "solver": settings.solver_id,
        "unresolved_policy": settings.unresolved_policy.value,
    }


router.include_router(solve_router)
