from fastapi import APIRouter, Depends, HTTPException
import logging

from rajaoil_admin.dependencies import get_catalog_repository
from rajaoil_admin.errors import DuplicateEntryError, InvalidValueError
from rajaoil_admin.models.product import NameRequest, ProductCreate, ProductUpdate, ProductVariant
from rajaoil_admin.repositories.catalog_repo import CatalogRepository

logger = logging.getLogger(__name__)
router = APIRouter()


def _product_not_found():
    return HTTPException(status_code=404, detail="Product not found")


# ---------- Products ----------

@router.get("/products")
def list_products(repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        products = repo.list_products()
    except Exception as e:
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch products")
    return {"success": True, "products": [p.model_dump(mode="json") for p in products], "count": len(products)}


@router.post("/products", status_code=201)
def create_product(payload: ProductCreate, repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        product = repo.create_product(payload)
    except DuplicateEntryError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error adding product: {e}")
        raise HTTPException(status_code=500, detail="Failed to add product")
    return {"success": True, "product": product.model_dump(mode="json")}


@router.get("/products/{name}")
def get_product(name: str, repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        product = repo.get_product(name)
    except Exception as e:
        logger.error(f"Error fetching product {name}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch product")
    if product is None:
        raise _product_not_found()
    return {"success": True, "product": product.model_dump(mode="json")}


@router.put("/products/{name}")
def update_product(name: str, payload: ProductUpdate, repo: CatalogRepository = Depends(get_catalog_repository)):
    """Updates brand, category and main image. Variants have their own routes."""
    try:
        matched = repo.update_product(name, payload)
    except Exception as e:
        logger.error(f"Error updating product {name}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update product")
    if matched == 0:
        raise _product_not_found()
    return {"success": True, "message": "Product updated successfully"}


@router.delete("/products/{name}")
def delete_product(name: str, repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        deleted = repo.delete_product(name)
    except Exception as e:
        logger.error(f"Error deleting product {name}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete product")
    if deleted == 0:
        raise _product_not_found()
    return {"success": True, "message": "Product deleted successfully"}


@router.post("/products/{name}/types", status_code=201)
def add_product_type(name: str, variant: ProductVariant, repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        product = repo.add_variant(name, variant)
    except Exception as e:
        logger.error(f"Error adding type to {name}: {e}")
        raise HTTPException(status_code=500, detail="Failed to add type")
    if product is None:
        raise _product_not_found()
    return {"success": True, "product": product.model_dump(mode="json")}


@router.put("/products/{name}/types/{index}")
def update_product_type(
    name: str,
    index: int,
    variant: ProductVariant,
    repo: CatalogRepository = Depends(get_catalog_repository),
):
    try:
        product = repo.update_variant(name, index, variant)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating type {index} of {name}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update type")
    if product is None:
        raise _product_not_found()
    return {"success": True, "product": product.model_dump(mode="json")}


@router.delete("/products/{name}/types/{index}")
def delete_product_type(name: str, index: int, repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        product = repo.delete_variant(name, index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error deleting type {index} of {name}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete type")
    if product is None:
        raise _product_not_found()
    return {"success": True, "product": product.model_dump(mode="json")}


# ---------- Brands & categories ----------

@router.get("/brands")
def list_brands(repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        return {"success": True, "brands": repo.list_brands()}
    except Exception as e:
        logger.error(f"Error fetching brands: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch brands")


@router.post("/brands", status_code=201)
def add_brand(payload: NameRequest, repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        brands = repo.add_brand(payload.name)
    except DuplicateEntryError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error adding brand: {e}")
        raise HTTPException(status_code=500, detail="Failed to add brand")
    return {"success": True, "brands": brands}


@router.delete("/brands/{name}")
def delete_brand(name: str, repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        brands = repo.delete_brand(name)
    except Exception as e:
        logger.error(f"Error deleting brand: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete brand")
    if brands is None:
        raise HTTPException(status_code=404, detail="Brand not found")
    return {"success": True, "brands": brands}


@router.get("/categories")
def list_categories(repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        return {"success": True, "categories": repo.list_categories()}
    except Exception as e:
        logger.error(f"Error fetching categories: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch categories")


@router.post("/categories", status_code=201)
def add_category(payload: NameRequest, repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        categories = repo.add_category(payload.name)
    except DuplicateEntryError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except InvalidValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error adding category: {e}")
        raise HTTPException(status_code=500, detail="Failed to add category")
    return {"success": True, "categories": categories}


@router.delete("/categories/{name}")
def delete_category(name: str, repo: CatalogRepository = Depends(get_catalog_repository)):
    try:
        categories = repo.delete_category(name)
    except Exception as e:
        logger.error(f"Error deleting category: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete category")
    if categories is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return {"success": True, "categories": categories}
