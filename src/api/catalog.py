"""FastAPI routes for categories and products."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from api.deps import require_admin
from api.schemas import (
    CategoryListResponse,
    CategoryRequest,
    CategoryResponse,
    CategorySchema,
    MessageResponse,
    ProductCreateRequest,
    ProductListResponse,
    ProductResponse,
    ProductSchema,
    ProductUpdateRequest,
)
from services import catalog
from utils.pure import SQLITE_MAX_INT

# ---------------------------------------------------------------------------
# Category Router
# ---------------------------------------------------------------------------
category_router = APIRouter(prefix="/category", tags=["category"])


@category_router.post(
    "/addCategory",
    status_code=201,
    response_model=CategoryResponse,
    dependencies=[Depends(require_admin)],
)
async def add_category(body: CategoryRequest) -> CategoryResponse:
    category = await catalog.create_category(body.name, body.description)
    return CategoryResponse(
        message="Category created successfully",
        category=CategorySchema.from_record(category),
    )


@category_router.put(
    "/updateCategory/{cat_id}",
    response_model=CategoryResponse,
    dependencies=[Depends(require_admin)],
)
async def update_category(
    body: CategoryRequest, cat_id: int = Path(le=SQLITE_MAX_INT)
) -> CategoryResponse:
    category = await catalog.update_category(cat_id, body.name, body.description)
    return CategoryResponse(
        message="Category updated successfully",
        category=CategorySchema.from_record(category),
    )


@category_router.get("/getAllCategories", response_model=CategoryListResponse)
async def get_all_categories() -> CategoryListResponse:
    categories = await catalog.list_categories()
    return CategoryListResponse(
        message="Categories fetched successfully",
        categories=[CategorySchema.from_record(c) for c in categories],
    )


@category_router.get("/getCategory/{cat_id}", response_model=CategoryResponse)
async def get_category(cat_id: int = Path(le=SQLITE_MAX_INT)) -> CategoryResponse:
    category = await catalog.get_category(cat_id)
    return CategoryResponse(
        message="Category fetched successfully",
        category=CategorySchema.from_record(category),
    )


@category_router.delete(
    "/deleteCategory/{cat_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_category(cat_id: int = Path(le=SQLITE_MAX_INT)) -> MessageResponse:
    await catalog.delete_category(cat_id)
    return MessageResponse(message="Category deleted successfully")


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/product", tags=["product"])


@product_router.post(
    "/addProduct",
    status_code=201,
    response_model=ProductResponse,
    dependencies=[Depends(require_admin)],
)
async def add_product(body: ProductCreateRequest) -> ProductResponse:
    product = await catalog.create_product(
        body.name,
        body.price,
        body.stock,
        cat_id=body.category_id,
        descr=body.description,
        image_urls=body.image_urls,
    )
    return ProductResponse(
        message="Product added successfully", product=ProductSchema.from_record(product)
    )


@product_router.put(
    "/updateProduct/{pid}",
    response_model=ProductResponse,
    dependencies=[Depends(require_admin)],
)
async def update_product(
    body: ProductUpdateRequest, pid: int = Path(le=SQLITE_MAX_INT)
) -> ProductResponse:
    product = await catalog.update_product(
        pid,
        name=body.name,
        descr=body.description,
        price=body.price,
        stock=body.stock,
        cat_id=body.category_id,
        image_urls=body.image_urls,
    )
    return ProductResponse(
        message="Product updated successfully", product=ProductSchema.from_record(product)
    )


@product_router.get("/allProducts", response_model=ProductListResponse)
async def all_products(
    category_id: Optional[int] = Query(default=None, le=SQLITE_MAX_INT),
) -> ProductListResponse:
    products = await catalog.list_products(category_id)
    return ProductListResponse(
        message="Products fetched successfully",
        products=[ProductSchema.from_record(p) for p in products],
    )


@product_router.get("/product/{pid}", response_model=ProductResponse)
async def get_product(pid: int = Path(le=SQLITE_MAX_INT)) -> ProductResponse:
    product = await catalog.get_product(pid)
    return ProductResponse(
        message="Product fetched successfully", product=ProductSchema.from_record(product)
    )


@product_router.delete(
    "/deleteProduct/{pid}",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_product(pid: int = Path(le=SQLITE_MAX_INT)) -> MessageResponse:
    await catalog.delete_product(pid)
    return MessageResponse(message="Product deleted successfully")
