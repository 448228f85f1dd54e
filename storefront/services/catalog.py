# storefront/services/catalog.py
from dataclasses import dataclass

import requests
from requests import RequestException
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductVariantModel
from storefront.domain.errors import CatalogUnavailable
from storefront.utils.logging import get_logger
from storefront.utils.retry import http_retry

logger = get_logger(__name__)


@dataclass(frozen=True)
class CatalogVariant:
    id: int
    product_id: int
    name: str
    sku: str | None
    unit_price: int
    stock: int


class SqlCatalog:
    """Katalog z tej samej bazy (tabela product_variants)."""

    def __init__(self, db: Session):
        self.db = db

    def get_variant(self, variant_id: int) -> CatalogVariant | None:
        v = self.db.get(ProductVariantModel, variant_id, populate_existing=True)
        if v is None:
            return None
        return CatalogVariant(
            id=v.id,
            product_id=v.product_id,
            name=v.name,
            sku=v.sku,
            unit_price=v.price,
            stock=v.stock,
        )


class HttpCatalogClient:
    """Zewnetrzny catalog-service po HTTP, retry na bledy transportu."""

    def __init__(self, base_url: str, timeout: int = 2):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @http_retry()
    def _fetch(self, variant_id: int) -> dict | None:
        url = f"{self.base_url}/variants/{variant_id}"
        logger.info(f"CatalogClient GET {url}")

        resp = requests.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp.json()

    def get_variant(self, variant_id: int) -> CatalogVariant | None:
        try:
            data = self._fetch(variant_id)
        except RequestException as e:
            logger.error(f"Catalog unavailable for variant {variant_id}: {e}")
            raise CatalogUnavailable() from e

        if data is None:
            return None
        return CatalogVariant(
            id=int(data["id"]),
            product_id=int(data["product_id"]),
            name=data.get("name", ""),
            sku=data.get("sku"),
            unit_price=int(data["price"]),
            stock=int(data.get("stock", 0)),
        )
