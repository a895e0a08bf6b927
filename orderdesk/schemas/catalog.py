"""Catalog DTOs (brands, products, attributes, variants)."""
from decimal import Decimal
from typing import List, Optional

from pydantic import AliasChoices, Field

from orderdesk.schemas.base import RequestModel


class BrandCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=200)


class ProductCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=200)
    brand_id: Optional[int] = Field(None, validation_alias=AliasChoices('brandId', 'brand_id'))
    description: Optional[str] = None


class AttributeCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: Optional[str] = Field(None, max_length=50)
    sort_order: int = Field(0, validation_alias=AliasChoices('sortOrder', 'sort_order'))


class AttributeOptionCreate(RequestModel):
    value: str = Field(..., min_length=1, max_length=100)
    sort_order: int = Field(0, validation_alias=AliasChoices('sortOrder', 'sort_order'))


class BrandUpdate(RequestModel):
    name: str = Field(..., min_length=1, max_length=200)


class ProductUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    brand_id: Optional[int] = Field(None, validation_alias=AliasChoices('brandId', 'brand_id'))
    description: Optional[str] = None
    active: Optional[bool] = None


class AttributeUpdate(RequestModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    code: Optional[str] = Field(None, max_length=50)
    sort_order: Optional[int] = Field(None, validation_alias=AliasChoices('sortOrder', 'sort_order'))
    is_active: Optional[bool] = Field(None, validation_alias=AliasChoices('isActive', 'is_active'))


class AttributeOptionUpdate(RequestModel):
    value: Optional[str] = Field(None, min_length=1, max_length=100)
    sort_order: Optional[int] = Field(None, validation_alias=AliasChoices('sortOrder', 'sort_order'))
    is_active: Optional[bool] = Field(None, validation_alias=AliasChoices('isActive', 'is_active'))


class OptionSelection(RequestModel):
    attribute_id: int = Field(..., gt=0, validation_alias=AliasChoices('attributeId', 'attribute_id'))
    option_id: int = Field(..., gt=0, validation_alias=AliasChoices('optionId', 'option_id'))


class VariantCreate(RequestModel):
    sku: str = Field(..., min_length=1, max_length=100)
    unit: str = Field('piece', min_length=1, max_length=30)
    stock_on_hand: Decimal = Field(
        Decimal('0'), ge=0, max_digits=12, decimal_places=3,
        validation_alias=AliasChoices('stockOnHand', 'stock_on_hand')
    )
    allow_preorder: bool = Field(False, validation_alias=AliasChoices('allowPreorder', 'allow_preorder'))
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    price_cents: int = Field(..., ge=0, validation_alias=AliasChoices('priceCents', 'price_cents'))
    selections: List[OptionSelection] = Field(..., min_length=1)

    def selection_pairs(self):
        return [(s.attribute_id, s.option_id) for s in self.selections]


class VariantUpdate(RequestModel):
    sku: Optional[str] = Field(None, min_length=1, max_length=100)
    unit: Optional[str] = Field(None, min_length=1, max_length=30)
    stock_on_hand: Optional[Decimal] = Field(
        None, ge=0, max_digits=12, decimal_places=3,
        validation_alias=AliasChoices('stockOnHand', 'stock_on_hand')
    )
    allow_preorder: Optional[bool] = Field(None, validation_alias=AliasChoices('allowPreorder', 'allow_preorder'))
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    price_cents: Optional[int] = Field(None, ge=0, validation_alias=AliasChoices('priceCents', 'price_cents'))
    selections: Optional[List[OptionSelection]] = None

    def changes(self) -> dict:
        data = self.model_dump(exclude_unset=True, exclude={'selections'})
        if self.selections is not None:
            data['selections'] = [(s.attribute_id, s.option_id) for s in self.selections]
        return data
