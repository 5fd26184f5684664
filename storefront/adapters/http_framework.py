"""
Adapter for HTTP framework (FastAPI).

Route modules, dependencies and the app factory take FastAPI's request
helpers from here instead of importing the framework directly.
"""
from fastapi import APIRouter, Depends, FastAPI, File, Form, Header, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles


class FastAPIRouterAdapter:
    """Keeps FastAPI's APIRouter behind the adapter."""

    def __init__(self, router: APIRouter):
        self._router = router

    @property
    def router(self) -> APIRouter:
        return self._router


class HTTPFrameworkAdapter:
    """Framework names used by the storefront HTTP layer."""

    # Parameter declarations
    Query = staticmethod(Query)
    Header = staticmethod(Header)
    Form = staticmethod(Form)
    File = staticmethod(File)
    Depends = staticmethod(Depends)

    # Request/response types
    Request = Request
    UploadFile = UploadFile
    JSONResponse = JSONResponse
    Response = Response
    RequestValidationError = RequestValidationError

    def create_app(self, **kwargs) -> FastAPI:
        return FastAPI(**kwargs)

    def create_router(self, **kwargs) -> FastAPIRouterAdapter:
        """Create an APIRouter wrapped in a FastAPIRouterAdapter."""
        return FastAPIRouterAdapter(APIRouter(**kwargs))

    def static_files(self, directory: str) -> StaticFiles:
        """ASGI app serving files from ``directory`` read-only."""
        return StaticFiles(directory=directory)
