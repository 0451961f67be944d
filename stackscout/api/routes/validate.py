from __future__ import annotations

from fastapi import APIRouter, Depends

from stackscout.agents.stack_validator import StackValidator
from stackscout.api.deps import AuthenticatedUser, ai_rate_limit, get_stack_validator
from stackscout.errors import StackScoutError
from stackscout.models.schemas import ValidateStackRequest, ValidateStackResponse

router = APIRouter(prefix="/api/validate", tags=["validate"])


@router.post(
    "/tech-stack",
    response_model=ValidateStackResponse,
    response_model_exclude_none=True,
)
async def validate_tech_stack(
    request: ValidateStackRequest,
    user: AuthenticatedUser = Depends(ai_rate_limit),
    validator: StackValidator = Depends(get_stack_validator),
):
    selections = {k: v for k, v in request.selections.items() if v and v.strip()}
    if not selections:
        return ValidateStackResponse(warnings=[])

    try:
        warnings = await validator.validate(selections)
    except StackScoutError:
        raise
    except Exception as e:
        raise StackScoutError("Failed to validate tech stack", str(e)) from e
    return ValidateStackResponse(warnings=warnings)
