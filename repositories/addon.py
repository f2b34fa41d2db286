"""
Add-On Repository

Catalog of globally owned add-on definitions.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from models.addon import AddOn, AddOnDefinitionDTO

logger = logging.getLogger(__name__)


class AddOnRepository:
    """Repository for add-on catalog operations."""

    @staticmethod
    async def list_addons(
        active_only: bool,
        session: AsyncSession | Session
    ) -> list[AddOnDefinitionDTO]:
        """
        Get add-on definitions sorted by sort_order, then name.

        Args:
            active_only: Skip deactivated add-ons
            session: Database session

        Returns:
            List of AddOnDefinitionDTO
        """
        stmt = select(AddOn).order_by(AddOn.sort_order.asc(), AddOn.name.asc())
        if active_only:
            stmt = stmt.where(AddOn.is_active == True)

        result = await session_execute(stmt, session)
        addons = result.scalars().all()
        return [AddOnDefinitionDTO.model_validate(addon, from_attributes=True) for addon in addons]

    @staticmethod
    async def get_by_ids(
        addon_ids: list[str] | set[str],
        session: AsyncSession | Session
    ) -> dict[str, AddOnDefinitionDTO]:
        """
        Batch-load add-on definitions (prevents N+1 queries).

        Returns:
            Dict mapping add-on id to AddOnDefinitionDTO; unknown ids are absent
        """
        if not addon_ids:
            return {}

        stmt = select(AddOn).where(AddOn.id.in_(list(addon_ids)))
        result = await session_execute(stmt, session)
        return {
            addon.id: AddOnDefinitionDTO.model_validate(addon, from_attributes=True)
            for addon in result.scalars().all()
        }

    @staticmethod
    async def get_by_id(
        addon_id: str,
        session: AsyncSession | Session
    ) -> AddOnDefinitionDTO | None:
        stmt = select(AddOn).where(AddOn.id == addon_id)
        result = await session_execute(stmt, session)
        addon = result.scalar()

        if addon is None:
            return None

        return AddOnDefinitionDTO.model_validate(addon, from_attributes=True)

    @staticmethod
    async def add(
        definition: AddOnDefinitionDTO,
        session: AsyncSession | Session
    ) -> None:
        """
        Insert an add-on definition. Does not commit.

        Example:
            await AddOnRepository.add(AddOnDefinitionDTO(
                id="digital-proof",
                name="Digital Proof",
                configuration={"pricing_model": "FLAT", "price": "5.00"},
            ), session)
        """
        session.add(AddOn(
            id=definition.id,
            name=definition.name,
            description=definition.description,
            pricing_model=definition.pricing_model.value,
            addon_type=definition.addon_type.value,
            configuration=definition.configuration.model_dump(mode='json'),
            mandatory=definition.mandatory,
            is_active=definition.is_active,
            additional_turnaround_days=definition.additional_turnaround_days,
            sort_order=definition.sort_order
        ))
        await session_flush(session)
        logger.debug(f"Added add-on {definition.id} ({definition.pricing_model.value})")
