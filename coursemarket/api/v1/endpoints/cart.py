from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursemarket.api.dependencies import get_current_user
from coursemarket.database import get_db
from coursemarket.models.user import User
from coursemarket.schemas.cart import CartAdd, CartMerge, CartResponse
from coursemarket.schemas.common import MessageResponse
from coursemarket.services.cart_service import CartService

router = APIRouter()

@router.get("/", response_model=CartResponse)
async def read_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return CartService(db).get_cart(current_user.id)

@router.post("/", response_model=CartResponse)
async def add_to_cart(
    request: CartAdd,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Добавить курс; повторное добавление ничего не меняет"""
    return CartService(db).add_item(current_user.id, request.course_id)

@router.post("/merge", response_model=CartResponse)
async def merge_cart(
    request: CartMerge,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Перенести гостевую корзину после входа"""
    return CartService(db).merge_cart(current_user.id, request.course_ids)

@router.delete("/", response_model=MessageResponse)
async def clear_cart(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    CartService(db).clear_cart(current_user.id)
    return {"message": "Cart cleared successfully"}

@router.delete("/{course_id}", response_model=CartResponse)
async def remove_from_cart(
    course_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return CartService(db).remove_item(current_user.id, course_id)
