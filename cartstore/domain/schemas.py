# cartstore/domain/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _Model(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Product(_Model):
    """Produkt z katalogu. Tworzony przy dekodowaniu odpowiedzi HTTP, potem niezmienny."""

    id: int
    title: str
    price: float = Field(..., ge=0)
    description: str = ""
    image: str = ""
    category: str = ""


class CartItem(Product):
    """Pozycja koszyka: produkt + ilosc (zawsze >= 1)."""

    quantity: int = Field(..., ge=1)


class CartState(_Model):
    items: tuple[CartItem, ...] = ()
    total_quantity: int = Field(0, ge=0)
    total_amount: float = 0.0


class ProductState(_Model):
    is_loading: bool = False
    product_list: tuple[Product, ...] = ()
    filtered_products: tuple[Product, ...] = ()


class RootState(_Model):
    cart: CartState = CartState()
    product: ProductState = ProductState()


class QuantityUpdate(_Model):
    """Payload dla cart/updateQuantity. Ujemna ilosc jest traktowana jak 0."""

    id: int
    quantity: int
