import attrs
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.command.validate_ticket_use_case import ValidateTicketUseCase
from src.service.admission.app.dto.validation_result import ScanContext, ValidationResult
from src.service.admission.domain.enum.validation_enum import ValidationType
from src.service.admission.driving_adapter.http_controller.schema.validation_schema import (
    ValidateTicketRequest,
    ValidateTicketResponse,
)
from src.service.shared_kernel.domain.value_object.calendar_date import CalendarDate
from src.service.shared_kernel.domain.value_object.caller import Caller
from src.service.shared_kernel.driving_adapter.http_controller.auth.caller_auth import (
    get_current_caller,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _to_response(result: ValidationResult) -> ValidateTicketResponse:
    return ValidateTicketResponse.model_validate(
        attrs.asdict(result, value_serializer=lambda _i, _f, v: getattr(v, 'value', v))
    )


@router.post(
    '',
    response_model=ValidateTicketResponse,
    responses={status.HTTP_400_BAD_REQUEST: {'model': ValidateTicketResponse}},
)
@Logger.io
async def validate_ticket(
    request: ValidateTicketRequest,
    http_request: Request,
    caller: Caller = Depends(get_current_caller),
    use_case: ValidateTicketUseCase = Depends(ValidateTicketUseCase.depends),
) -> ValidateTicketResponse | JSONResponse:
    """Admit a scanned ticket. Soft rejections answer 400 with the full result body."""
    validation_date = (
        CalendarDate.parse(request.validation_date) if request.validation_date else None
    )
    context = ScanContext(
        validation_type=ValidationType(request.validation_type),
        location=request.location,
        user_agent=http_request.headers.get('user-agent'),
        ip=http_request.client.host if http_request.client else None,
    )

    with tracer.start_as_current_span('controller.validate_ticket') as span:
        span.set_attribute('caller.role', str(caller.role))
        result = await use_case.execute(
            qr_code_data=request.qr_code_data,
            caller=caller,
            validation_date=validation_date,
            context=context,
        )
        span.set_attribute('validation.success', result.success)

    response = _to_response(result)
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=response.model_dump(mode='json'),
        )
    return response
