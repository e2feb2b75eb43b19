"""
Repository for the product catalog.

Products are stored in the root collection, one document per product, keyed by
product name and tagged with docType="product". Brands and categories are plain
string lists kept on the configuration document.
"""

from typing import List, Optional
import logging

from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError

from rajaoil_admin.config import ROOT_COLLECTION, CONFIG_DOCUMENT_ID
from rajaoil_admin.errors import DuplicateEntryError, InvalidValueError
from rajaoil_admin.models.product import Product, ProductCreate, ProductUpdate, ProductVariant
from rajaoil_admin.models.site_config import SiteConfig
from rajaoil_admin.utils.string_utils import normalize_string

logger = logging.getLogger(__name__)

PRODUCT_DOC_TYPE = "product"


class CatalogRepository:
    """Product/Catalog Accessor"""

    def __init__(self, database):
        self.collection = database[ROOT_COLLECTION]

    # ---------- Products ----------

    def list_products(self) -> List[Product]:
        products = []
        for raw in self.collection.find({"docType": PRODUCT_DOC_TYPE}):
            try:
                products.append(Product.from_document(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed product {raw.get('_id')}: {e.error_count()} error(s)")
        return products

    def get_product(self, name: str) -> Optional[Product]:
        raw = self.collection.find_one({"_id": name, "docType": PRODUCT_DOC_TYPE})
        if raw is None:
            return None
        return Product.from_document(raw)

    def create_product(self, data: ProductCreate) -> Product:
        """
        Creates a product keyed by its name.
        Variants without a name or a price are dropped.

        Raises:
            InvalidValueError: empty or reserved name, invalid variant
            DuplicateEntryError: a document with that name already exists
        """
        name = (data.name or "").strip()
        if not name:
            raise InvalidValueError("Product name is required")
        if name == CONFIG_DOCUMENT_ID:
            raise InvalidValueError(f"'{name}' is a reserved name")

        try:
            variants = [
                ProductVariant(name=draft.name.strip(), price=draft.price, image=draft.image, offer=draft.offer)
                for draft in data.types
                if draft.name.strip() and draft.price is not None
            ]
        except ValidationError as e:
            raise InvalidValueError(f"Invalid product type: {e.errors()[0]['msg']}")

        doc = {
            "_id": name,
            "docType": PRODUCT_DOC_TYPE,
            "brand": data.brand,
            "category": data.category,
            "mainImage": data.mainImage,
            "types": [variant.model_dump() for variant in variants],
        }
        try:
            self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateEntryError(f"Product '{name}' already exists")
        logger.info(f"✅ Product created: {name}")
        return Product.from_document(doc)

    def update_product(self, name: str, data: ProductUpdate) -> int:
        result = self.collection.update_one(
            {"_id": name, "docType": PRODUCT_DOC_TYPE},
            {"$set": {"brand": data.brand, "category": data.category, "mainImage": data.mainImage}},
        )
        return result.matched_count

    def delete_product(self, name: str) -> int:
        result = self.collection.delete_one({"_id": name, "docType": PRODUCT_DOC_TYPE})
        if result.deleted_count:
            logger.info(f"🗑️ Product deleted: {name}")
        return result.deleted_count

    # ---------- Variants ----------

    def add_variant(self, name: str, variant: ProductVariant) -> Optional[Product]:
        product = self.get_product(name)
        if product is None:
            return None
        return self._write_variants(product, product.types + [variant])

    def update_variant(self, name: str, index: int, variant: ProductVariant) -> Optional[Product]:
        """
        Raises:
            IndexError: if there is no variant at `index`
        """
        product = self.get_product(name)
        if product is None:
            return None
        if not 0 <= index < len(product.types):
            raise IndexError(f"No product type at index {index}")
        variants = list(product.types)
        variants[index] = variant
        return self._write_variants(product, variants)

    def delete_variant(self, name: str, index: int) -> Optional[Product]:
        product = self.get_product(name)
        if product is None:
            return None
        if not 0 <= index < len(product.types):
            raise IndexError(f"No product type at index {index}")
        variants = [v for i, v in enumerate(product.types) if i != index]
        return self._write_variants(product, variants)

    def _write_variants(self, product: Product, variants: List[ProductVariant]) -> Product:
        self.collection.update_one(
            {"_id": product.name, "docType": PRODUCT_DOC_TYPE},
            {"$set": {"types": [v.model_dump() for v in variants]}},
        )
        return product.model_copy(update={"types": variants})

    # ---------- Brands & categories ----------

    def get_config(self) -> SiteConfig:
        return SiteConfig.from_document(self.collection.find_one({"_id": CONFIG_DOCUMENT_ID}))

    def list_brands(self) -> List[str]:
        return self.get_config().brands

    def add_brand(self, name: str) -> List[str]:
        return self._add_to_list("brands", name, "Brand")

    def delete_brand(self, name: str) -> Optional[List[str]]:
        return self._remove_from_list("brands", name)

    def list_categories(self) -> List[str]:
        return self.get_config().category

    def add_category(self, name: str) -> List[str]:
        return self._add_to_list("category", name, "Category")

    def delete_category(self, name: str) -> Optional[List[str]]:
        return self._remove_from_list("category", name)

    def _add_to_list(self, field: str, name: str, label: str) -> List[str]:
        """
        Appends `name` to a sidecar list.
        Names are compared normalized, so "Raja Gold" and "raja-gold" collide.

        Raises:
            InvalidValueError: empty name
            DuplicateEntryError: name already in the list
        """
        name = (name or "").strip()
        if not name:
            raise InvalidValueError(f"{label} name is required")
        current = getattr(self.get_config(), field)
        if any(normalize_string(existing) == normalize_string(name) for existing in current):
            raise DuplicateEntryError(f"{label} '{name}' already exists")
        updated = current + [name]
        self.collection.update_one({"_id": CONFIG_DOCUMENT_ID}, {"$set": {field: updated}}, upsert=True)
        logger.info(f"✅ {label} added: {name}")
        return updated

    def _remove_from_list(self, field: str, name: str) -> Optional[List[str]]:
        """Returns the new list, or None when `name` was not in it."""
        current = getattr(self.get_config(), field)
        if name not in current:
            return None
        updated = [existing for existing in current if existing != name]
        self.collection.update_one({"_id": CONFIG_DOCUMENT_ID}, {"$set": {field: updated}}, upsert=True)
        logger.info(f"🗑️ Removed '{name}' from {field}")
        return updated
