from sqlalchemy import JSON, Column, DateTime, String, Table
from sqlalchemy.orm import registry

from photo_export.domain.models import Product

mapper_registry = registry()
products_table = Table(
    "products",
    mapper_registry.metadata,
    Column("id", String, primary_key=True),
    Column("company", String, index=True, nullable=False),
    Column("photos", JSON, nullable=False, default=list),
    Column("created", DateTime(timezone=True)),
)

mapper_registry.map_imperatively(Product, products_table)
