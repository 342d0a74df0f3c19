from pydantic import Field

from models.base import CamelDTO


class ProductSnapshotDTO(CamelDTO):
    """
    Denormalized product fields carried by local cart and wishlist items,
    so the UI can render them without a network round-trip.
    """
    product_id: int
    product_name: str = ""
    product_slug: str = ""
    product_image: str = ""
    price: float = 0.0
    stock: int = 0


class ProductImageDTO(CamelDTO):
    image_url: str | None = None
    is_primary: bool | None = None


class RemoteProductDTO(CamelDTO):
    """Product as embedded in Remote Store cart and wishlist responses."""
    id: int
    name: str = ""
    slug: str = ""
    price: float = 0.0
    stock: int = 0
    image_url: str | None = None
    images: list[ProductImageDTO] = Field(default_factory=list)

    def primary_image(self) -> str:
        """
        Pick the image to display: the primary image, else the first image,
        else the legacy ``imageUrl`` field, else an empty string.
        """
        if self.images:
            selected = next((img for img in self.images if img.is_primary), self.images[0])
            if selected.image_url:
                return selected.image_url
        return self.image_url or ""

    def to_snapshot(self) -> ProductSnapshotDTO:
        return ProductSnapshotDTO(
            product_id=self.id,
            product_name=self.name,
            product_slug=self.slug,
            product_image=self.primary_image(),
            price=self.price,
            stock=self.stock,
        )
