# cartstore/product_service/main.py
from fastapi import FastAPI, HTTPException
import uvicorn

app = FastAPI(title="Product Catalog (dev mock)")


PRODUCTS = {
    1: {
        "id": 1,
        "title": "Mechanical Keyboard",
        "price": 199.99,
        "description": "Tenkeyless, brown switches",
        "image": "https://example.com/img/keyboard.png",
        "category": "electronics",
    },
    2: {
        "id": 2,
        "title": "Wireless Mouse",
        "price": 49.5,
        "description": "Ergonomic, 2.4 GHz",
        "image": "https://example.com/img/mouse.png",
        "category": "electronics",
    },
    3: {
        "id": 3,
        "title": "Cotton T-Shirt",
        "price": 15.0,
        "description": "Plain white, size M",
        "image": "https://example.com/img/tshirt.png",
        "category": "men's clothing",
    },
}


@app.get("/products")
def list_products():
    return list(PRODUCTS.values())


@app.get("/products/{product_id}")
def get_product(product_id: int):
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8001)
