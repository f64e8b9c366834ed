import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from photo_export.application.exceptions import ProductQueryError
from photo_export.domain.models import Product
from .orm import products_table

logger = logging.getLogger(__name__)


class PgProductGateway:
    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def list_by_company(self, company_id: str) -> list[Product]:
        query = (
            select(Product)
            .filter_by(company=company_id)
            .order_by(products_table.c.created, products_table.c.id)
        )
        try:
            result = await self.db_session.execute(query)
        except (SQLAlchemyError, OSError) as e:
            logger.error(e)
            raise ProductQueryError(reason=str(e)) from e
        return list(result.scalars().all())
