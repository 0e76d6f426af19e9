"""Product catalog: list, low-stock, search, CRUD. Mutations are admin-only."""
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from voicepos.api.deps import get_current_user, get_db, require_admin
from voicepos.core.audit import AuditLog
from voicepos.core.config import settings
from voicepos.models.user import User
from voicepos.schemas.product import ProductCreate, ProductDeleted, ProductOut, ProductUpdate
from voicepos.services import catalog_service

router = APIRouter()


@router.get("", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return catalog_service.list_products(db, current_user.id)


@router.get("/low-stock", response_model=List[ProductOut])
def low_stock(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Products at or below their own threshold, emptiest first."""
    return catalog_service.list_low_stock(db, current_user.id)


@router.get("/search", response_model=List[ProductOut])
def search_products(
    q: str = Query("", description="Case-insensitive name fragment"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return catalog_service.find_by_name(db, current_user.id, q, limit=settings.SEARCH_RESULT_LIMIT)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return catalog_service.get_product(db, current_user.id, product_id)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    product = catalog_service.create_product(
        db,
        current_user.id,
        name=data.name,
        price=data.price,
        stock=data.stock,
        category=data.category,
        barcode=data.barcode,
        low_stock_threshold=data.low_stock_threshold,
    )
    AuditLog.log_action("create", "product", product.id, current_user, changes={"name": product.name})
    return product


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    changes = data.model_dump(exclude_unset=True)
    product = catalog_service.update_product(db, current_user.id, product_id, changes)
    AuditLog.log_action("update", "product", product.id, current_user, changes=changes)
    return product


@router.delete("/{product_id}", response_model=ProductDeleted)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    name = catalog_service.delete_product(db, current_user.id, product_id)
    AuditLog.log_action("delete", "product", product_id, current_user, changes={"name": name})
    return {"message": "Product deleted successfully", "id": product_id}
