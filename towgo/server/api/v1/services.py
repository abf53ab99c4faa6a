"""
Service Catalog Endpoints.

Paid services (e.g. priority dispatch) that can be bought through checkout.
"""

from typing import List

from fastapi import APIRouter, HTTPException, status

from towgo.core.database.entities import Service
from towgo.core.models.io.services import ServiceCreate, ServiceRead, ServiceUpdate
from towgo.server.services.deps import ServiceRepositoryDep

router = APIRouter()


@router.get(
    "",
    response_model=List[ServiceRead],
    summary="List Services",
    description="Return the service catalog.",
)
async def list_services(services: ServiceRepositoryDep) -> List[ServiceRead]:
    return [ServiceRead.model_validate(s) for s in await services.list()]


@router.get(
    "/{service_id}",
    response_model=ServiceRead,
    summary="Get Service",
    description="Return one catalog service.",
    responses={404: {"description": "Service not found"}},
)
async def get_service(service_id: int, services: ServiceRepositoryDep) -> ServiceRead:
    service = await services.get_by_id(service_id)
    if not service:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")
    return ServiceRead.model_validate(service)


@router.post(
    "",
    response_model=ServiceRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Service",
    description="Add a service to the catalog.",
)
async def create_service(data: ServiceCreate, services: ServiceRepositoryDep) -> ServiceRead:
    """
    Create a catalog service.

    - **name**: Service name
    - **description**: What the buyer gets
    - **price**: Price in USD
    - **price_id**: Optional existing Stripe price; created at first checkout otherwise
    - **active**: Whether the service is offered
    """
    service = await services.create(Service(**data.model_dump()))
    return ServiceRead.model_validate(service)


@router.patch(
    "/{service_id}",
    response_model=ServiceRead,
    summary="Update Service",
    description="Partially update a catalog service.",
    responses={404: {"description": "Service not found"}},
)
async def update_service(service_id: int, update: ServiceUpdate, services: ServiceRepositoryDep) -> ServiceRead:
    service = await services.get_by_id(service_id)
    if not service:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Service not found")

    for key, value in update.model_dump(exclude_unset=True).items():
        setattr(service, key, value)
    service = await services.update(service)
    return ServiceRead.model_validate(service)
