"""
Catalog service — customers, products and payment types.

These records are referenced by the ledger, not owned by it.
Their running balances are seeded from the opening figures on
creation. A later change to an opening figure moves the running
balance by the difference; the balance is never overwritten.
"""

import logging

from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from back_office.errors import ConflictError, NotFoundError
from back_office.models import ActivityEvent, Customer, Product, PaymentType
from back_office.models.base import transaction
from back_office.schemas.catalog import (
    CustomerCreate,
    CustomerUpdate,
    ProductCreate,
    ProductUpdate,
    PaymentTypeCreate,
)
from back_office.services.activity_service import ActivityService
from back_office.services.ledger_service import LedgerService, money
from back_office.services.pagination import paginate

logger = logging.getLogger("back_office.catalog")


class CatalogService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = LedgerService(db)
        self.activity = ActivityService(db)

    # --- Customers ---

    def create_customer(
        self, request: CustomerCreate, user_id: int | None = None
    ) -> Customer:
        """Create a customer whose total_due starts at the opening balance."""
        with transaction(self.db):
            opening = money(request.opening_balance)
            customer = Customer(
                name=request.name,
                phone=request.phone,
                address=request.address,
                opening_balance=opening,
                opening_date=request.opening_date,
                total_due=opening,
                credit_limit=money(request.credit_limit),
                is_active=request.is_active,
            )
            self.db.add(customer)
            self.db.flush()
            self.activity.record(
                ActivityEvent.CUSTOMER_CREATED, "customer", customer.id, user_id,
                name=customer.name,
                opening_balance=opening,
            )
        logger.info("Customer %s created with opening balance %s", customer.id, opening)
        return customer

    def update_customer(
        self, customer_id: int, request: CustomerUpdate, user_id: int | None = None
    ) -> Customer:
        with transaction(self.db):
            customer = self.get_customer(customer_id)
            old_opening = customer.opening_balance
            opening = money(request.opening_balance)

            customer.name = request.name
            customer.phone = request.phone
            customer.address = request.address
            customer.opening_balance = opening
            customer.opening_date = request.opening_date
            customer.credit_limit = money(request.credit_limit)
            customer.is_active = request.is_active

            self.ledger.adjust_due(customer_id, opening - old_opening)

            self.activity.record(
                ActivityEvent.CUSTOMER_UPDATED, "customer", customer_id, user_id,
                old_opening_balance=old_opening,
                opening_balance=opening,
            )
        return customer

    def get_customer(self, customer_id: int) -> Customer:
        customer = self.db.get(Customer, customer_id)
        if not customer:
            raise NotFoundError(f"Customer {customer_id} not found")
        return customer

    def list_customers(
        self,
        search: str | None = None,
        with_due: bool = False,
        active_only: bool = False,
        page: int = 1,
        per_page: int = 15,
    ) -> tuple[list[Customer], int]:
        query = select(Customer)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                Customer.name.ilike(pattern),
                Customer.phone.ilike(pattern),
            ))
        if with_due:
            query = query.where(Customer.total_due > 0)
        if active_only:
            query = query.where(Customer.is_active.is_(True))
        return paginate(self.db, query.order_by(Customer.name), page, per_page)

    # --- Products ---

    def create_product(
        self, request: ProductCreate, user_id: int | None = None
    ) -> Product:
        """Create a product whose stock starts at the opening stock."""
        with transaction(self.db):
            product = Product(
                name=request.name,
                size=request.size,
                pieces_per_bundle=request.pieces_per_bundle,
                rate_per_kg=money(request.rate_per_kg),
                opening_stock=request.opening_stock,
                stock_pieces=request.opening_stock,
                min_stock_alert=request.min_stock_alert,
                is_active=request.is_active,
            )
            self.db.add(product)
            self.db.flush()
            self.activity.record(
                ActivityEvent.PRODUCT_CREATED, "product", product.id, user_id,
                name=product.name,
                opening_stock=request.opening_stock,
            )
        logger.info("Product %s created with opening stock %s", product.id, request.opening_stock)
        return product

    def update_product(
        self, product_id: int, request: ProductUpdate, user_id: int | None = None
    ) -> Product:
        with transaction(self.db):
            product = self.get_product(product_id)
            old_opening = product.opening_stock

            product.name = request.name
            product.size = request.size
            product.pieces_per_bundle = request.pieces_per_bundle
            product.rate_per_kg = money(request.rate_per_kg)
            product.opening_stock = request.opening_stock
            product.min_stock_alert = request.min_stock_alert
            product.is_active = request.is_active

            self.ledger.adjust_stock(product_id, request.opening_stock - old_opening)

            self.activity.record(
                ActivityEvent.PRODUCT_UPDATED, "product", product_id, user_id,
                old_opening_stock=old_opening,
                opening_stock=request.opening_stock,
            )
        return product

    def get_product(self, product_id: int) -> Product:
        product = self.db.get(Product, product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def list_products(
        self,
        search: str | None = None,
        active_only: bool = False,
        page: int = 1,
        per_page: int = 15,
    ) -> tuple[list[Product], int]:
        query = select(Product)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                Product.name.ilike(pattern),
                Product.size.ilike(pattern),
            ))
        if active_only:
            query = query.where(Product.is_active.is_(True))
        return paginate(self.db, query.order_by(Product.name), page, per_page)

    # --- Payment types ---

    def create_payment_type(
        self, request: PaymentTypeCreate, user_id: int | None = None
    ) -> PaymentType:
        with transaction(self.db):
            existing = self.db.execute(
                select(PaymentType).where(PaymentType.name == request.name)
            ).scalar_one_or_none()
            if existing:
                raise ConflictError(f"Payment type '{request.name}' already exists")

            payment_type = PaymentType(name=request.name, is_active=request.is_active)
            self.db.add(payment_type)
            self.db.flush()
            self.activity.record(
                ActivityEvent.PAYMENT_TYPE_CREATED, "payment_type", payment_type.id, user_id,
                name=payment_type.name,
            )
        return payment_type

    def list_payment_types(self, active_only: bool = True) -> list[PaymentType]:
        query = select(PaymentType).order_by(PaymentType.name)
        if active_only:
            query = query.where(PaymentType.is_active.is_(True))
        return list(self.db.execute(query).scalars().all())
