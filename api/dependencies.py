# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: dependencies.py
# -----------------------------------------------------------------------------
from fastapi import Request

from api.AppContainer import AppContainer
from services.DocDocumentService import DocDocumentService
from services.DocHealthService import DocHealthService
from services.DocQueryService import DocQueryService
from services.DocRetrievalService import DocRetrievalService


def get_container(request: Request) -> AppContainer:
    # built once in the app lifespan
    return request.app.state.container

def get_health_service(request: Request) -> DocHealthService:
    return get_container(request).health_service

def get_retrieval_service(request: Request) -> DocRetrievalService:
    return get_container(request).retrieval_service

def get_query_service(request: Request) -> DocQueryService:
    return get_container(request).query_service

def get_document_service(request: Request) -> DocDocumentService:
    return get_container(request).document_service
