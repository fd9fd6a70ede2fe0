"""Clients Routes — client CRUD plus the jobs that reference a client."""

from fastapi import APIRouter, Depends, Response, status

from jobbook.api.dependencies import AppContainer, get_container
from jobbook.core.errors import DomainValidationError
from jobbook.schemas.client import Client

router = APIRouter(prefix="/api/v1/clients", tags=["clients"])


@router.get("")
async def list_clients(app: AppContainer = Depends(get_container)):
    return {"clients": await app.clients.persisted.fetch()}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Client)
async def create_client(body: Client, app: AppContainer = Depends(get_container)):
    return await app.clients.persisted.create(body)


@router.get("/{client_id}", response_model=Client)
async def get_client(client_id: str, app: AppContainer = Depends(get_container)):
    return (
        app.clients.client(client_id)
        or await app.clients.persisted.fetch_by_id(client_id)
    )


@router.put("/{client_id}", response_model=Client)
async def put_client(
    client_id: str, body: Client, app: AppContainer = Depends(get_container),
):
    if body.id != client_id:
        raise DomainValidationError(
            f"Body id '{body.id}' does not match path id '{client_id}'", "id",
        )
    return await app.clients.persisted.modify(body)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_id: str, app: AppContainer = Depends(get_container)):
    await app.clients.persisted.remove(client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{client_id}/jobs")
async def list_client_jobs(
    client_id: str, app: AppContainer = Depends(get_container),
):
    return {"jobs": await app.jobs.repository.jobs_for_client(client_id)}
