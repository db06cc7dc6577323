"""
Handler de exceções do DRF.

Toda falha sai no envelope `{"error": str, "details"?: str}`.
"""
from __future__ import annotations

import structlog
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from clinica_core.core.domain.exceptions import ClinicaError

logger = structlog.get_logger(__name__)


def _pydantic_details(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def _drf_details(data) -> str | None:
    if isinstance(data, dict):
        if set(data) == {"detail"}:
            return None
        return "; ".join(f"{k}: {_drf_details(v) or v}" for k, v in data.items())
    if isinstance(data, list):
        return "; ".join(str(item) for item in data)
    return str(data)


def _view_name(context) -> str:
    view = context.get("view") if context else None
    return view.__class__.__name__ if view is not None else "-"


def api_exception_handler(exc, context):
    view = _view_name(context)

    if isinstance(exc, ClinicaError):
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("api.erro", view=view, error=exc.message, details=exc.details, exc_info=exc)
        else:
            logger.info("api.erro_cliente", view=view, status=int(exc.status_code), error=exc.message)
        return Response(exc.to_payload(), status=int(exc.status_code))

    if isinstance(exc, PydanticValidationError):
        return Response(
            {"error": "Dados inválidos", "details": _pydantic_details(exc)},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, DjangoValidationError):
        return Response(
            {"error": "Dados inválidos", "details": "; ".join(exc.messages)},
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, IntegrityError):
        logger.info("api.conflito", view=view, error=str(exc))
        return Response(
            {"error": "Conflito com registro existente", "details": str(exc)},
            status=status.HTTP_409_CONFLICT,
        )

    # APIException / Http404 / PermissionDenied: o DRF já resolve status e headers
    response = drf_exception_handler(exc, context)
    if response is not None:
        data = response.data
        message = data.get("detail") if isinstance(data, dict) and "detail" in data else "Dados inválidos"
        payload = {"error": str(message)}
        details = _drf_details(data)
        if details:
            payload["details"] = details
        response.data = payload
        return response

    logger.exception("api.erro_inesperado", view=view)
    return Response({"error": "Erro interno do servidor"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
