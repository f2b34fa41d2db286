"""
Product Configuration Repository

Configuration store for product pricing configurations with optimistic
version checks (single writer per product).
"""

import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush, session_rollback
from exceptions.configuration import ProductConfigNotFoundException, VersionConflict
from models.product_config import ProductConfig, ProductConfigDTO

logger = logging.getLogger(__name__)

# Columns of their own, not part of the JSON payload
_ROW_FIELDS = {'product_id', 'version', 'is_published'}


class ProductConfigRepository:
    """Repository for product configuration snapshots."""

    @staticmethod
    async def load_product_config(
        product_id: str,
        session: AsyncSession | Session
    ) -> ProductConfigDTO:
        """
        Load the current configuration snapshot of a product.

        Args:
            product_id: Product ID
            session: Database session

        Returns:
            ProductConfigDTO carrying the stored version

        Raises:
            ProductConfigNotFoundException: If nothing is stored for the product
        """
        stmt = (
            select(ProductConfig)
            .where(ProductConfig.product_id == product_id)
            .execution_options(populate_existing=True)
        )
        result = await session_execute(stmt, session)
        row = result.scalar()

        if row is None:
            raise ProductConfigNotFoundException(product_id)

        return ProductConfigDTO.model_validate({
            **row.payload,
            'product_id': row.product_id,
            'version': row.version,
            'is_published': row.is_published,
        })

    @staticmethod
    async def save_product_config(
        product_id: str,
        config: ProductConfigDTO,
        expected_version: int,
        session: AsyncSession | Session
    ) -> int:
        """
        Store a configuration if nobody else saved the product since it was loaded.

        Does not commit; the caller owns the transaction.

        Args:
            product_id: Product ID
            config: Configuration to store
            expected_version: Version the edit was based on (0 = product not stored yet)
            session: Database session

        Returns:
            The new version

        Raises:
            VersionConflict: If the stored version differs from expected_version

        Example:
            >>> config = await ProductConfigRepository.load_product_config("bc-001", session)
            >>> edited = config.model_copy(update={"rush_fee": Decimal("30")})
            >>> await ProductConfigRepository.save_product_config("bc-001", edited, config.version, session)
            2
        """
        payload = config.model_dump(mode='json', exclude=_ROW_FIELDS)

        if expected_version == 0:
            current_version = await ProductConfigRepository.get_version(product_id, session)
            if current_version is not None:
                raise VersionConflict(product_id, expected_version, current_version)

            session.add(ProductConfig(
                product_id=product_id,
                version=1,
                is_published=config.is_published,
                payload=payload
            ))
            try:
                await session_flush(session)
            except IntegrityError:
                await session_rollback(session)
                raise VersionConflict(product_id, expected_version, None)
            return 1

        stmt = (
            update(ProductConfig)
            .where(ProductConfig.product_id == product_id)
            .where(ProductConfig.version == expected_version)
            .values(
                version=expected_version + 1,
                is_published=config.is_published,
                payload=payload,
                updated_at=datetime.utcnow()
            )
        )
        result = await session_execute(stmt, session)

        if result.rowcount != 1:
            current_version = await ProductConfigRepository.get_version(product_id, session)
            logger.warning(
                f"Version conflict saving product {product_id}: expected {expected_version}, found {current_version}"
            )
            raise VersionConflict(product_id, expected_version, current_version)

        return expected_version + 1

    @staticmethod
    async def get_version(
        product_id: str,
        session: AsyncSession | Session
    ) -> int | None:
        """
        Get the stored version of a product configuration.

        Returns:
            Version number, or None if the product is not stored
        """
        stmt = select(ProductConfig.version).where(ProductConfig.product_id == product_id)
        result = await session_execute(stmt, session)
        return result.scalar()
