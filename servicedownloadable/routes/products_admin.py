import json

from fastapi import APIRouter, Depends, HTTPException
from slugify import slugify

from servicedownloadable.constants.product_types import PRODUCT_TYPES
from servicedownloadable.dependencies.services import get_downloadable_service
from servicedownloadable.dependencies.auth import require_admin
from servicedownloadable.exceptions import BusinessRuleError
from servicedownloadable.models.product import Product
from servicedownloadable.models.user import User
from servicedownloadable.schemas.product_config import ProductConfig
from servicedownloadable.schemas.product_schemas import ProductCreate, ProductUpdate
from servicedownloadable.services.downloadable_service import DownloadableService

router = APIRouter()


def product_to_api(product: Product) -> dict:
    return {
        "id": product.id,
        "title": product.title,
        "slug": product.slug,
        "type": product.type,
        "config": ProductConfig.from_json(product.config).to_dict(),
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


@router.post("/")
def create_product(
    payload: ProductCreate,
    service: DownloadableService = Depends(get_downloadable_service),
    admin: User = Depends(require_admin),
):
    if payload.type not in PRODUCT_TYPES:
        raise HTTPException(400, "Invalid product type")

    slug = payload.slug
    if not slug or slug.strip() == "":
        slug = slugify(payload.title)

    product = Product(
        title=payload.title,
        slug=slug,
        type=payload.type,
        config=json.dumps(payload.config) if payload.config else None,
    )
    service.products.store(product)

    return product_to_api(product)


@router.get("/{product_id}")
def get_product(
    product_id: int,
    service: DownloadableService = Depends(get_downloadable_service),
    admin: User = Depends(require_admin),
):
    product = service.products.get_existing_by_id(product_id, "Product not found")
    return product_to_api(product)


@router.put("/{product_id}")
def update_product(
    product_id: int,
    payload: ProductUpdate,
    service: DownloadableService = Depends(get_downloadable_service),
    admin: User = Depends(require_admin),
):
    product = service.products.get_existing_by_id(product_id, "Product not found")

    if payload.type is not None and payload.type not in PRODUCT_TYPES:
        raise HTTPException(400, "Invalid product type")

    if payload.title is not None:
        product.title = payload.title
    if payload.slug:
        product.slug = payload.slug
    if payload.type is not None:
        product.type = payload.type
    if payload.config is not None:
        options = {k: v for k, v in payload.config.items() if v is not None}
        product.config = ProductConfig.from_json(product.config).merge(options).to_json()

    service.products.store(product)
    return product_to_api(product)


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    service: DownloadableService = Depends(get_downloadable_service),
    admin: User = Depends(require_admin),
):
    product = service.products.get_existing_by_id(product_id, "Product not found")

    if service.orders.find_one(product_id=product.id):
        raise BusinessRuleError("Cannot remove product which has orders")

    service.products.trash(product)
    return True
