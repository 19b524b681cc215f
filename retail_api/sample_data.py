"""Starter catalog written by ``retail-api seed``."""
from __future__ import annotations

from typing import Any, Dict, List

SAMPLE_PRODUCTS: List[Dict[str, Any]] = [
    {
        "id": 1,
        "name": "Premium Wireless Headphones",
        "description": "Noise-cancelling over-ear headphones with 30-hour battery life.",
        "category": "Electronics",
        "price": 299.99,
        "stock": 45,
        "image": "/images/headphones.jpg",
        "rating": 4.5,
        "reviews": [
            {"id": 1, "user": "Maria", "rating": 5, "comment": "Amazing sound quality.", "date": "2025-01-12"},
            {"id": 2, "user": "Tom", "rating": 4, "comment": "Comfortable, a bit heavy.", "date": "2025-02-03"},
        ],
    },
    {
        "id": 2,
        "name": "Smart Watch Pro",
        "description": "Fitness tracker with heart rate monitor, GPS and sleep tracking.",
        "category": "Electronics",
        "price": 399.99,
        "stock": 28,
        "image": "/images/smart-watch.jpg",
        "rating": 4,
        "reviews": [
            {"id": 1, "user": "Lucia", "rating": 4, "comment": "Battery lasts all week.", "date": "2025-03-21"},
        ],
    },
    {
        "id": 3,
        "name": "Mechanical Keyboard RGB",
        "description": "Mechanical keyboard with Cherry MX switches and aluminum frame.",
        "category": "Electronics",
        "price": 159.99,
        "stock": 43,
        "image": "/images/keyboard.jpg",
        "rating": 0,
        "reviews": [],
    },
    {
        "id": 4,
        "name": "Organic Cotton T-Shirt",
        "description": "Soft, breathable t-shirt made from 100% organic cotton.",
        "category": "Clothing",
        "price": 24.99,
        "stock": 120,
        "image": "/images/t-shirt.jpg",
        "rating": 0,
        "reviews": [],
    },
    {
        "id": 5,
        "name": "Stainless Steel Water Bottle",
        "description": "Insulated bottle that keeps drinks cold for 24 hours.",
        "category": "Home",
        "price": 34.5,
        "stock": 2,
        "image": "/images/water-bottle.jpg",
        "rating": 0,
        "reviews": [],
    },
]
