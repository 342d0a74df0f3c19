"""
Unit Tests: Remote product and cart mapping
"""

from models.cart import CartDTO, CartItemDTO, RemoteCartResponseDTO
from models.product import RemoteProductDTO


class TestPrimaryImage:

    def test_prefers_primary(self):
        product = RemoteProductDTO.model_validate({"id": 1, "images": [
            {"imageUrl": "first.jpg"}, {"imageUrl": "primary.jpg", "isPrimary": True},
        ]})

        assert product.primary_image() == "primary.jpg"

    def test_falls_back_to_first_image(self):
        product = RemoteProductDTO.model_validate({"id": 1, "images": [{"imageUrl": "first.jpg"}]})

        assert product.primary_image() == "first.jpg"

    def test_falls_back_to_legacy_url(self):
        product = RemoteProductDTO.model_validate({"id": 1, "imageUrl": "legacy.jpg"})

        assert product.primary_image() == "legacy.jpg"

    def test_empty_when_no_image(self):
        assert RemoteProductDTO(id=1).primary_image() == ""


class TestCartAggregates:

    def test_from_items(self):
        cart = CartDTO.from_items([
            CartItemDTO(product_id=1, price=1500, quantity=2, stock=5),
            CartItemDTO(product_id=2, price=300, quantity=3, stock=5),
        ])

        assert cart.total == 3900
        assert cart.total_items == 5
        assert cart.get_item(2).quantity == 3
        assert cart.get_item(3) is None

    def test_remote_totals_recomputed(self):
        response = RemoteCartResponseDTO.model_validate({
            "items": [{"product": {"id": 1, "price": 1000, "stock": 4}, "quantity": 3}],
            "total": 123,
            "totalItems": 99,
        })

        cart = response.to_cart()

        assert cart.total == 3000
        assert cart.total_items == 3
