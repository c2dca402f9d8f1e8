from fastapi import APIRouter

from papeleo.api.routers import (
    contact,
    contracts,
    documents,
    extensions,
    invitations,
    me,
    members,
    organizations,
    projects,
    required_documents,
    users,
)

api_router = APIRouter()

api_router.include_router(organizations.router)
api_router.include_router(projects.router)
api_router.include_router(contracts.router)
api_router.include_router(required_documents.router)
api_router.include_router(users.router)
api_router.include_router(invitations.router)
api_router.include_router(me.router)
api_router.include_router(members.router)
api_router.include_router(extensions.router)
api_router.include_router(documents.router)
api_router.include_router(contact.router)
