# app/main.py
import logging
from http import HTTPStatus
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Path, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .core import (
    CategoryIn, CategoryOut, ErrorOut, ProductIn, ProductOut,
    _make_category_dict, _make_error_dict, _make_product_dict,
)
from .database import Store, create_store
from .logging_config import setup_logging
from .models import Category, Product
from .services import CategoryService, ProductService

logger = logging.getLogger(__name__)

CATEGORY_NOT_FOUND = "Category not found"
NOT_FOUND_RESPONSE = {404: {"model": ErrorOut, "description": CATEGORY_NOT_FOUND}}

# ids beyond a signed 64-bit integer cannot exist in either backend
MAX_ID = 2**63 - 1


def _error_response(status_code: int, message: str) -> JSONResponse:
    error = HTTPStatus(status_code).phrase
    return JSONResponse(status_code=status_code, content=_make_error_dict(status_code, error, message))


def create_app(store: Optional[Store] = None) -> FastAPI:
    """Wire storage, services and routes into a FastAPI app.

    Without an explicit ``store`` the backend named by
    ``settings.database_url`` is used.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    if store is None:
        store = create_store(settings.database_url)
    categories = CategoryService(store.categories)
    products = ProductService(store.products)

    app = FastAPI(title=settings.project_name, version=settings.api_version)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------------------------
    # Error bodies
    # ---------------------------
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"] if part not in ("body", "query", "path"))
        message = f"{field}: {first['msg']}" if field else first["msg"]
        logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
        return _error_response(status.HTTP_400_BAD_REQUEST, message)

    def _resolve_category(category_id: int) -> Category:
        category = categories.find_by_id(category_id)
        if category is None:
            logger.warning("Category %s not found", category_id)
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=CATEGORY_NOT_FOUND)
        return category

    def _create_product(category_id: int, payload: ProductIn) -> ProductOut:
        category = _resolve_category(category_id)
        saved = products.create(Product(name=payload.name, price=payload.price, category=category))
        return ProductOut(**_make_product_dict(saved))

    # ---------------------------
    # Category endpoints
    # ---------------------------
    @app.post("/categories", response_model=CategoryOut, status_code=201, tags=["categories"],
              summary="Create a category")
    async def create_category(payload: CategoryIn):
        saved = categories.create(Category(name=payload.name))
        return CategoryOut(**_make_category_dict(saved))

    @app.get("/categories", response_model=List[CategoryOut], tags=["categories"],
             summary="List all categories")
    async def list_categories():
        return [CategoryOut(**_make_category_dict(c)) for c in categories.list()]

    @app.post("/categories/{category_id}/products", response_model=ProductOut, status_code=201,
              responses=NOT_FOUND_RESPONSE, tags=["categories"],
              summary="Create a product in a category")
    async def create_category_product(payload: ProductIn, category_id: int = Path(..., ge=1, le=MAX_ID)):
        return _create_product(category_id, payload)

    @app.get("/categories/{category_id}/products", response_model=List[ProductOut],
             responses=NOT_FOUND_RESPONSE, tags=["categories"],
             summary="List the products of a category")
    async def list_category_products(category_id: int = Path(..., ge=1, le=MAX_ID)):
        _resolve_category(category_id)
        return [ProductOut(**_make_product_dict(p)) for p in products.list_by_category(category_id)]

    # ---------------------------
    # Product endpoints
    # ---------------------------
    @app.post("/products", response_model=ProductOut, status_code=201,
              responses=NOT_FOUND_RESPONSE, tags=["products"],
              summary="Create a product linked to a category")
    async def create_product(payload: ProductIn, category_id: int = Query(..., alias="categoryId", ge=1, le=MAX_ID)):
        return _create_product(category_id, payload)

    @app.get("/products", response_model=List[ProductOut], tags=["products"],
             summary="List all products with their categories")
    async def list_products():
        return [ProductOut(**_make_product_dict(p)) for p in products.list()]

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
