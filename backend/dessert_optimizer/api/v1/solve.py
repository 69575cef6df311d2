from fastapi import APIRouter, Request

from dessert_optimizer.domain.schema import DessertRequest, DessertResult
from dessert_optimizer.domain.validate import validate_request
from dessert_optimizer.solvers.lp.solver import solve_lp

router = APIRouter(tags=["solve"])


@router.post("/solve-dessert", response_model=DessertResult)
def solve_dessert(req: DessertRequest, request: Request) -> DessertResult:
    validate_request(req)
    return solve_lp(req, settings=request.app.state.settings)
