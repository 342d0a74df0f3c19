"""
Startup for hosts embedding the commerce engine.

start() configures logging, validates the configuration and wires a
CommerceSession from it. Running this module prints what the Local Store
currently holds for the guest, priced with the configured shipping.
"""

import logging
import sys

import config
from exceptions.base import CommerceException
from services.commerce_session import CommerceSession
from utils.config_validator import validate_or_exit
from utils.error_handler import handle_commerce_error, handle_unexpected_error
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def start() -> CommerceSession:
    """Call once at application startup; exits with code 1 on invalid configuration."""
    setup_logging()
    validate_or_exit(config)
    session = CommerceSession.create()
    logger.info(f"[Startup] Commerce session ready ({config.RUNTIME_ENVIRONMENT.value}, "
                f"storage={config.LOCAL_STORAGE_BACKEND}, api={config.API_BASE_URL})")
    return session


def print_local_status(session: CommerceSession) -> None:
    cart = session.local_cart.get()
    wishlist = session.local_wishlist.get()

    print(f"Guest cart: {cart.total_items} item(s) in {len(cart.items)} line(s)")
    for item in cart.items:
        print(f"  #{item.product_id} {item.product_name} x{item.quantity} @ {item.price:,.0f}")

    summary = session.checkout.summary()
    print(f"Subtotal: {summary.subtotal:,.0f}")
    print(f"Shipping: {'free' if summary.is_free_shipping else f'{summary.shipping_fee:,.0f}'}")
    print(f"Total: {summary.final_amount:,.0f}")

    print(f"Guest wishlist: {wishlist.total_items} product(s)")
    if not cart.items and not wishlist.items:
        print("Nothing pending for the next login sync.")


def main() -> None:
    try:
        session = start()
        print_local_status(session)
    except CommerceException as e:
        print(handle_commerce_error(e), file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(handle_unexpected_error(e), file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
