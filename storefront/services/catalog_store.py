"""
Product catalog store: categories and products
"""
import logging
import re
from typing import List, Optional

from sqlalchemy import select

from storefront.errors import NotFoundError, ValidationError
from storefront.models import MAX_INTEGER, Category, Product
from storefront.money import parse_amount
from storefront.services.base_store import BaseStore

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')

UPDATABLE_PRODUCT_FIELDS = (
    'name', 'description', 'price', 'quantity', 'category_id', 'image_url', 'is_active'
)


class CatalogStore(BaseStore):

    # Categories

    def list_categories(self) -> List[Category]:
        with self._reading('list_categories'):
            return list(self.session.scalars(select(Category).order_by(Category.name)))

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        with self._reading('get_category_by_slug'):
            return self.session.scalars(
                select(Category).filter_by(slug=slug)
            ).first()

    def create_category(self, name: str, slug: str, description: Optional[str] = None) -> Category:
        name = (name or '').strip()
        slug = (slug or '').strip()
        if not name:
            raise ValidationError('Category name is required')
        if not SLUG_PATTERN.match(slug):
            raise ValidationError(f'Malformed category slug: {slug!r}')
        if self.get_category_by_slug(slug) is not None:
            raise ValidationError(f'Category slug already exists: {slug}')

        category = Category(name=name, slug=slug, description=description)
        self.session.add(category)
        self._persist('create_category')

        logger.info(f'Category created: {slug}', extra={
            'event_type': 'category_created',
            'category_id': category.id,
        })
        return category

    # Products

    def list_products(self, category_slug: Optional[str] = None) -> List[Product]:
        """Active products, newest first. An unknown category slug yields []."""
        query = select(Product).filter_by(is_active=True)
        if category_slug:
            category = self.get_category_by_slug(category_slug)
            if category is None:
                return []
            query = query.filter_by(category_id=category.id)

        with self._reading('list_products'):
            return list(self.session.scalars(
                query.order_by(Product.created_at.desc(), Product.id.desc())
            ))

    def get_product(self, product_id) -> Optional[Product]:
        """Fetch a product by id, active or not."""
        with self._reading('get_product'):
            return self.session.get(Product, product_id)

    def require_product(self, product_id) -> Product:
        product = self.get_product(product_id)
        if product is None:
            raise NotFoundError(f'Product not found: {product_id}')
        return product

    def create_product(self, name, price, quantity=0, description=None,
                       category_id=None, image_url=None) -> Product:
        fields = self._clean_product_fields({
            'name': name,
            'price': price,
            'quantity': quantity,
            'description': description,
            'category_id': category_id,
            'image_url': image_url,
        })
        product = Product(**fields)
        self.session.add(product)
        self._persist('create_product')

        logger.info(f'Product created: {product.name}', extra={
            'event_type': 'product_created',
            'product_id': product.id,
        })
        return product

    def update_product(self, product_id, commit=True, **changes) -> Product:
        unknown = set(changes) - set(UPDATABLE_PRODUCT_FIELDS)
        if unknown:
            raise ValidationError(f'Unknown product fields: {", ".join(sorted(unknown))}')

        product = self.require_product(product_id)
        for field, value in self._clean_product_fields(changes).items():
            setattr(product, field, value)
        self._persist('update_product', commit=commit)
        return product

    def deactivate_product(self, product_id) -> Product:
        """Soft delete: hide from listings, keep the row for order history."""
        product = self.require_product(product_id)
        product.is_active = False
        self._persist('deactivate_product')

        logger.info(f'Product deactivated: {product_id}', extra={
            'event_type': 'product_deactivated',
            'product_id': product_id,
        })
        return product

    def _clean_product_fields(self, fields):
        cleaned = dict(fields)
        if 'name' in cleaned:
            cleaned['name'] = (cleaned['name'] or '').strip()
            if not cleaned['name']:
                raise ValidationError('Product name is required')
        if 'price' in cleaned:
            try:
                cleaned['price'] = parse_amount(cleaned['price'])
            except ValueError as e:
                raise ValidationError(f'Product price: {e}') from e
        if 'quantity' in cleaned:
            quantity = cleaned['quantity']
            if isinstance(quantity, bool) or not isinstance(quantity, int) or not 0 <= quantity <= MAX_INTEGER:
                raise ValidationError(f'Product quantity must be an integer from 0 to {MAX_INTEGER}')
        if 'is_active' in cleaned and not isinstance(cleaned['is_active'], bool):
            raise ValidationError('Product active flag must be a boolean')
        if cleaned.get('category_id') is not None:
            category_id = cleaned['category_id']
            if isinstance(category_id, bool) or not isinstance(category_id, int) or not 0 < category_id <= MAX_INTEGER:
                raise ValidationError(f'Malformed category id: {category_id!r}')
            with self._reading('get_category'):
                category = self.session.get(Category, category_id)
            if category is None:
                raise NotFoundError(f'Category not found: {category_id}')
        return cleaned
