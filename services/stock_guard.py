"""
Stock/Quantity Guard

Every path that sets a cart quantity goes through StockGuard.resolve(), so
the rule ``1 <= quantity <= stock`` holds for everything that gets stored.
"""

import logging

from enums.stock_policy import StockPolicy
from exceptions.cart import StockExceededException

logger = logging.getLogger(__name__)


class StockGuard:

    @staticmethod
    def resolve(product_id: int, requested: int, stock: int,
                policy: StockPolicy = StockPolicy.CLAMP) -> int | None:
        """
        Resolve a requested quantity against the available stock.

        Args:
            product_id: Product the quantity is for (used for error context)
            requested: Quantity the caller asked for
            stock: Last known available stock
            policy: CLAMP reduces over-stock requests, REJECT raises

        Returns:
            int: Quantity to store (always >= 1)
            None: The line must be removed (request <= 0, or nothing in stock under CLAMP)

        Raises:
            StockExceededException: Request exceeds stock under REJECT

        Example:
            >>> StockGuard.resolve(7, 10, 5)
            5
            >>> StockGuard.resolve(7, 0, 5) is None
            True
        """
        if requested <= 0:
            return None

        stock = max(0, stock)
        if requested <= stock:
            return requested

        if policy == StockPolicy.REJECT:
            logger.info(f"[StockGuard] Rejected product {product_id}: requested {requested}, available {stock}")
            raise StockExceededException(product_id=product_id, requested=requested, available=stock)

        if stock == 0:
            logger.info(f"[StockGuard] Product {product_id} is out of stock, removing line")
            return None

        logger.debug(f"[StockGuard] Clamped product {product_id}: {requested} -> {stock}")
        return stock
