"""
Benefícios API: Benefit Route Handlers
=======================================

What:  The /api/beneficios route group (list, get, search, delete, create, update).
Why:   Public CRUD surface over the `beneficios` collection.
How:   Each handler pulls the shared collection from the database dependency
       and delegates to BeneficioService. Errors are raised, never returned:
       the global handlers in main.py format them.

Routes:
    GET    /api/beneficios/               list (limit, skip, order)
    GET    /api/beneficios/id/{id}        get by id (array of 0 or 1)
    GET    /api/beneficios/nome/{filtro}  search by name
    DELETE /api/beneficios/{id}           delete by id
    POST   /api/beneficios/               create
    PUT    /api/beneficios/               update (id in body)

The collection routes also answer without the trailing slash.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorCollection

from app.database import get_beneficios_collection
from app.schemas.beneficio import DeleteResult, ErrorResponse, InsertResult, UpdateResult
from app.services.beneficio_service import beneficio_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/beneficios", tags=["Benefícios"])

SERVER_ERROR = {500: {"description": "Storage failure", "model": ErrorResponse}}
BAD_REQUEST = {400: {"description": "Validation failed", "model": ErrorResponse}}

EXAMPLE_BENEFICIO = {
    "nome": "Cesta Básica",
    "endereco": {"logradouro": "Rua das Flores, 10", "bairro": "Centro", "cidade": "Votorantim"},
    "pontos": 10,
    "data": "2024-05-01",
    "quantidade": 3,
}


@router.get(
    "/",
    response_model=List[Dict[str, Any]],
    responses=SERVER_ERROR,
    summary="List benefits",
    description=(
        "Returns up to `limit` benefits (default 10) after skipping `skip` (default 0). "
        "`order` is accepted but does not change the ordering."
    ),
)
@router.get("", include_in_schema=False)
async def list_beneficios(
    limit: Optional[str] = Query(default=None, description="Page size (default 10)"),
    skip: Optional[str] = Query(default=None, description="Records to skip (default 0)"),
    order: Optional[str] = Query(default=None, description="Accepted, currently ignored"),
    collection: AsyncIOMotorCollection = Depends(get_beneficios_collection),
) -> List[Dict[str, Any]]:
    """
    List benefits.

    Why strings (not int) for limit/skip: non-numeric values fall back to the
    defaults instead of failing the request.
    """
    return await beneficio_service.list_beneficios(
        collection, limit=limit, skip=skip, order=order
    )


@router.get(
    "/id/{beneficio_id}",
    response_model=List[Dict[str, Any]],
    responses=SERVER_ERROR,
    summary="Get a benefit by id",
    description="Returns an array with the matching benefit, or an empty array.",
)
async def get_beneficio(
    beneficio_id: str,
    collection: AsyncIOMotorCollection = Depends(get_beneficios_collection),
) -> List[Dict[str, Any]]:
    return await beneficio_service.get_by_id(collection, beneficio_id)


@router.get(
    "/nome/{filtro}",
    response_model=List[Dict[str, Any]],
    responses=SERVER_ERROR,
    summary="Search benefits by name",
    description="Case-insensitive substring search on `nome`.",
)
async def search_beneficios(
    filtro: str,
    collection: AsyncIOMotorCollection = Depends(get_beneficios_collection),
) -> List[Dict[str, Any]]:
    return await beneficio_service.search_by_name(collection, filtro)


@router.delete(
    "/{beneficio_id}",
    response_model=DeleteResult,
    responses={
        404: {"description": "No benefit with this id", "model": ErrorResponse},
        **SERVER_ERROR,
    },
    summary="Delete a benefit",
)
async def delete_beneficio(
    beneficio_id: str,
    collection: AsyncIOMotorCollection = Depends(get_beneficios_collection),
) -> DeleteResult:
    return await beneficio_service.delete_by_id(collection, beneficio_id)


@router.post(
    "/",
    status_code=status.HTTP_201_CREATED,
    response_model=InsertResult,
    responses={**BAD_REQUEST, **SERVER_ERROR},
    summary="Create a benefit",
    description="Validates the body and stores it. The id is assigned by the database.",
)
@router.post("", status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_beneficio(
    body: Dict[str, Any] = Body(..., examples=[EXAMPLE_BENEFICIO]),
    collection: AsyncIOMotorCollection = Depends(get_beneficios_collection),
) -> InsertResult:
    return await beneficio_service.create(collection, body)


@router.put(
    "/",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=UpdateResult,
    responses={**BAD_REQUEST, **SERVER_ERROR},
    summary="Update a benefit",
    description=(
        "Selects the benefit by the `id` field of the body and replaces the other "
        "fields sent. The id itself is never written."
    ),
)
@router.put("", status_code=status.HTTP_202_ACCEPTED, include_in_schema=False)
async def update_beneficio(
    body: Dict[str, Any] = Body(
        ..., examples=[{"id": "665f1c2e9b1e8a3d4c5b6a79", **EXAMPLE_BENEFICIO}]
    ),
    collection: AsyncIOMotorCollection = Depends(get_beneficios_collection),
) -> UpdateResult:
    return await beneficio_service.update(collection, body)
