from shared.exceptions import NotFound, TeamMembershipError

from fastapi import Request
from fastapi.responses import JSONResponse


async def not_found_exception_handler(request: Request, exc: NotFound):
    return JSONResponse(
        status_code=404,
        content={
            "message": f"Oops! {exc.name} not found."
        },
    )


async def team_membership_exception_handler(request: Request, exc: TeamMembershipError):
    return JSONResponse(
        status_code=502,
        content={
            "message": str(exc)
        },
    )
