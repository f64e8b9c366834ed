from photo_export.domain.exceptions import DomainError
from photo_export.domain.models import PhotoReference, SkipReason
from photo_export.domain.value_objects import Path

from .interfaces import ProductGateway
from .ledger import SkipLedger


class ProductPhotoLocator:
    def __init__(self, product_gateway: ProductGateway, collection: str = "products"):
        self.product_gateway = product_gateway
        self.collection = Path(collection.strip("/") + "/")

    async def locate(self, company_id: str, ledger: SkipLedger) -> list[PhotoReference]:
        products = await self.product_gateway.list_by_company(company_id=company_id)

        references = []
        for product in products:
            if not product.has_photos:
                continue

            for index, filename in enumerate(product.photos):
                if not filename:
                    ledger.add(entry_name=f"{product.id}/[{index}]", reason=SkipReason.EMPTY_KEY)
                    continue

                try:
                    references.append(self._reference(product_id=product.id, filename=filename))
                except DomainError as e:
                    ledger.add(entry_name=f"{product.id}/{filename}", reason=SkipReason.INVALID_KEY,
                               detail=e.message)

        return references

    def _reference(self, product_id: str, filename: str) -> PhotoReference:
        if "/" in filename:
            raise DomainError(f"Photo name {filename!r} cannot contain /")

        product_dir = Path(product_id + "/")
        return PhotoReference(
            entry_name=product_dir.join(filename),
            blob_key=self.collection.join(product_dir).join(filename),
            product_id=product_id,
        )
