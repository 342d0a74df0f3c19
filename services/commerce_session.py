"""
Commerce session: the explicit auth state machine in front of the stores.

    GUEST --login--> AUTHENTICATED --logout--> GUEST

While GUEST the Local Store is authoritative; mutations are applied locally
and stay OPTIMISTIC (the server never sees them until the next login merges
them). While AUTHENTICATED the Remote Store is authoritative; mutations are
sent to the server and become CONFIRMED with the snapshot it returns.

The GUEST -> AUTHENTICATED transition runs the Sync Coordinator exactly once.
"""

import logging

from enums.auth_state import AuthState
from enums.change_signal import ChangeSignal
from enums.collection_kind import CollectionKind
from enums.mutation_state import MutationState
from enums.stock_policy import StockPolicy
from exceptions.base import CommerceException
from models.cart import CartDTO
from models.product import ProductSnapshotDTO
from models.sync import SyncReportDTO
from models.wishlist import WishlistDTO
from repositories.local_storage import LocalStorage, create_local_storage
from services.api_client import ApiClient
from services.checkout import CheckoutService
from services.local_store import LocalCartStore, LocalWishlistStore
from services.notification import ChangeNotifier
from services.remote_store import (
    RemoteCartClient, RemoteWishlistClient, CouponClient, PromotionClient, OrderClient,
)
from services.stock_guard import StockGuard
from services.sync import SyncCoordinator

logger = logging.getLogger(__name__)


class MutationAttempt:
    """
    One cart or wishlist mutation and the snapshot it produced.

    OPTIMISTIC -> CONFIRMED is the only transition; a confirmed attempt is final.
    """

    def __init__(self, collection: CollectionKind, operation: str, snapshot: CartDTO | WishlistDTO | None = None):
        self.collection = collection
        self.operation = operation
        self.snapshot = snapshot
        self.state = MutationState.OPTIMISTIC

    @property
    def is_confirmed(self) -> bool:
        return self.state == MutationState.CONFIRMED

    def confirm(self, snapshot: CartDTO | WishlistDTO) -> "MutationAttempt":
        """
        Record the server snapshot.

        Raises:
            ValueError: The attempt was already confirmed
        """
        if self.is_confirmed:
            raise ValueError(f"{self.collection.value} {self.operation} attempt is already confirmed")
        self.snapshot = snapshot
        self.state = MutationState.CONFIRMED
        return self

    def __repr__(self):
        return f"MutationAttempt({self.collection.value}, {self.operation}, {self.state.value})"


class CommerceSession:

    def __init__(self, api: ApiClient, notifier: ChangeNotifier,
                 local_cart: LocalCartStore, local_wishlist: LocalWishlistStore,
                 remote_cart: RemoteCartClient, remote_wishlist: RemoteWishlistClient,
                 sync: SyncCoordinator, checkout: CheckoutService):
        self.api = api
        self.notifier = notifier
        self.local_cart = local_cart
        self.local_wishlist = local_wishlist
        self.remote_cart = remote_cart
        self.remote_wishlist = remote_wishlist
        self.sync = sync
        self.checkout = checkout
        self.state = AuthState.AUTHENTICATED if api.is_authenticated else AuthState.GUEST

    @staticmethod
    def create(storage: LocalStorage | None = None, api: ApiClient | None = None,
               notifier: ChangeNotifier | None = None) -> "CommerceSession":
        """Wire a session from configuration; any collaborator can be injected."""
        storage = storage if storage is not None else create_local_storage()
        api = api or ApiClient()
        notifier = notifier or ChangeNotifier()

        local_cart = LocalCartStore(storage, notifier)
        local_wishlist = LocalWishlistStore(storage, notifier)
        remote_cart = RemoteCartClient(api)
        remote_wishlist = RemoteWishlistClient(api)
        return CommerceSession(
            api=api,
            notifier=notifier,
            local_cart=local_cart,
            local_wishlist=local_wishlist,
            remote_cart=remote_cart,
            remote_wishlist=remote_wishlist,
            sync=SyncCoordinator(local_cart, local_wishlist, remote_cart, remote_wishlist),
            checkout=CheckoutService(local_cart, CouponClient(api), PromotionClient(api), OrderClient(api),
                                     remote_cart=remote_cart),
        )

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.AUTHENTICATED

    async def login(self, access_token: str) -> SyncReportDTO | None:
        """
        GUEST -> AUTHENTICATED.

        Runs the sync once, then points the checkout at the server cart.

        Returns:
            The sync report of this transition, or None when the session was
            already authenticated (the token is refreshed, nothing is synced)
        """
        self.api.set_access_token(access_token)
        if self.is_authenticated:
            logger.debug("[Session] Already authenticated, token refreshed without sync")
            return None

        self.state = AuthState.AUTHENTICATED
        report = await self.sync.sync_after_login()
        await self._pin_server_cart()
        logger.info(f"[Session] Logged in (cart synced={report.cart.synced}, wishlist synced={report.wishlist.synced})")
        return report

    def logout(self) -> None:
        """AUTHENTICATED -> GUEST. The Local Store starts empty for the next guest."""
        self.api.clear_access_token()
        if self.is_authenticated:
            self.state = AuthState.GUEST
            self.checkout.use_cart(None)
            self.checkout.remove_coupon()
            logger.info("[Session] Logged out")

    async def _pin_server_cart(self) -> None:
        try:
            cart = await self.remote_cart.get_cart()
        except CommerceException as e:
            # Never price the guest cart while authenticated; place_order re-reads the server cart
            logger.warning(f"[Session] Server cart unavailable after login: {e}")
            cart = CartDTO.from_items([])
        self.checkout.use_cart(cart)

    async def _confirmed(self, attempt: MutationAttempt, snapshot: CartDTO | WishlistDTO,
                         changed: bool = True) -> MutationAttempt:
        attempt.confirm(snapshot)
        if attempt.collection == CollectionKind.CART:
            self.checkout.use_cart(snapshot)
        if changed:
            self.notifier.publish(ChangeSignal.for_collection(attempt.collection))
        return attempt

    async def _remove_remote_line(self, attempt: MutationAttempt, product_id: int) -> MutationAttempt:
        await self.remote_cart.remove_item(product_id)
        return await self._confirmed(attempt, await self.remote_cart.get_cart())

    async def get_cart(self) -> MutationAttempt:
        attempt = MutationAttempt(CollectionKind.CART, "get")
        if not self.is_authenticated:
            attempt.snapshot = self.local_cart.get()
            return attempt
        attempt.confirm(await self.remote_cart.get_cart())
        self.checkout.use_cart(attempt.snapshot)
        return attempt

    async def get_wishlist(self) -> MutationAttempt:
        attempt = MutationAttempt(CollectionKind.WISHLIST, "get")
        if not self.is_authenticated:
            attempt.snapshot = self.local_wishlist.get()
            return attempt
        return attempt.confirm(await self.remote_wishlist.get_wishlist())

    def mark_in_wishlist(self, product_ids: list[int]) -> dict[int, bool] | None:
        """
        Wishlist membership for a guest product listing.

        Returns:
            None when authenticated; the server marks its own listings
        """
        if self.is_authenticated:
            return None
        return self.local_wishlist.mark_in_wishlist(product_ids)

    async def add_to_cart(self, product: ProductSnapshotDTO, quantity: int = 1,
                          policy: StockPolicy = StockPolicy.CLAMP) -> MutationAttempt:
        """
        Add ``quantity`` units; the quantity already in the cart counts against stock.

        Raises:
            StockExceededException: Only with StockPolicy.REJECT
            RemoteStoreException: Authenticated and the server rejected the request
        """
        attempt = MutationAttempt(CollectionKind.CART, "add")
        if not self.is_authenticated:
            attempt.snapshot = self.local_cart.add_item(product, quantity, policy)
            return attempt

        current = await self.remote_cart.get_cart()
        line = current.get_item(product.product_id)
        existing = line.quantity if line else 0

        resolved = StockGuard.resolve(product.product_id, existing + quantity, product.stock, policy)
        if resolved is None:
            if line is None:
                return await self._confirmed(attempt, current, changed=False)
            return await self._remove_remote_line(attempt, product.product_id)
        if resolved <= existing:
            return await self._confirmed(attempt, current, changed=False)
        # The server adds to the existing line
        return await self._confirmed(
            attempt, await self.remote_cart.add_item(product.product_id, resolved - existing))

    async def update_cart_item(self, product_id: int, quantity: int,
                               policy: StockPolicy = StockPolicy.CLAMP) -> MutationAttempt:
        """
        Raises:
            StockExceededException: Only with StockPolicy.REJECT
            RemoteStoreException: Authenticated and the server rejected the request
        """
        attempt = MutationAttempt(CollectionKind.CART, "update")
        if not self.is_authenticated:
            attempt.snapshot = self.local_cart.update_item_quantity(product_id, quantity, policy)
            return attempt

        if quantity <= 0:
            return await self._remove_remote_line(attempt, product_id)

        current = await self.remote_cart.get_cart()
        line = current.get_item(product_id)
        if line is None:
            return await self._confirmed(attempt, current, changed=False)

        resolved = StockGuard.resolve(product_id, quantity, line.stock, policy)
        if resolved is None:
            return await self._remove_remote_line(attempt, product_id)
        return await self._confirmed(attempt, await self.remote_cart.update_item(product_id, resolved))

    async def remove_from_cart(self, product_id: int) -> MutationAttempt:
        attempt = MutationAttempt(CollectionKind.CART, "remove")
        if not self.is_authenticated:
            attempt.snapshot = self.local_cart.remove_item(product_id)
            return attempt
        return await self._remove_remote_line(attempt, product_id)

    async def clear_cart(self) -> MutationAttempt:
        attempt = MutationAttempt(CollectionKind.CART, "clear")
        if not self.is_authenticated:
            self.local_cart.clear()
            attempt.snapshot = self.local_cart.get()
            return attempt

        await self.remote_cart.clear()
        return await self._confirmed(attempt, CartDTO.from_items([]))

    async def toggle_wishlist(self, product: ProductSnapshotDTO) -> MutationAttempt:
        attempt = MutationAttempt(CollectionKind.WISHLIST, "toggle")
        if not self.is_authenticated:
            attempt.snapshot = self.local_wishlist.toggle_item(product)
            return attempt

        if await self.remote_wishlist.contains(product.product_id):
            await self.remote_wishlist.remove_item(product.product_id)
            return await self._confirmed(attempt, await self.remote_wishlist.get_wishlist())
        return await self._confirmed(attempt, await self.remote_wishlist.add_item(product.product_id))
