"""
Product Configuration Service

Application layer around the pure pricing services:
- Admin edits as load → apply → save, retried on version conflicts
- Publication gate (validation must pass before a product goes live)
- Storefront quotes for the checkout flow
"""

import logging
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_commit, session_rollback
from exceptions.addon import AddOnNotFoundException, InvalidAddOnSetError
from exceptions.configuration import ProductNotPublishedException, VersionConflict
from models.addon_set import AddOnSetDTO
from models.paper_stock import ProductPaperStockDTO
from models.price_breakdown import PriceSelectionDTO, QuoteResultDTO
from models.pricing_tier import PricingTierDTO
from models.product_config import ProductConfigDTO
from repositories.addon import AddOnRepository
from repositories.product_config import ProductConfigRepository
from services.addon_set import AddOnSetService
from services.gang_run import GangRunService
from services.pricing import PricingService
from services.product_validation import ProductValidationService
from services.tier_table import TierTableService
from utils.transaction_manager import TransactionManager

logger = logging.getLogger(__name__)


class ProductConfigService:

    @staticmethod
    async def create(config: ProductConfigDTO, session: AsyncSession | Session) -> ProductConfigDTO:
        """
        Store a new product configuration as an unpublished draft.

        The tier table is normalized before saving.

        Raises:
            VersionConflict: If the product is already stored
            InvalidTierError: If a tier is malformed
        """
        draft = config.model_copy(update={
            'pricing_tiers': TierTableService.normalize(config.pricing_tiers),
            'is_published': False
        })
        new_version = await ProductConfigRepository.save_product_config(config.product_id, draft, 0, session)
        await session_commit(session)
        logger.info(f"Created product configuration {config.product_id}")
        return draft.model_copy(update={'version': new_version})

    @staticmethod
    async def edit(
        product_id: str,
        mutate_fn: Callable[[ProductConfigDTO], ProductConfigDTO],
        session: AsyncSession | Session
    ) -> ProductConfigDTO:
        """
        Apply an edit to the stored configuration.

        mutate_fn receives the freshly loaded snapshot and returns the edited
        one. On a version conflict the configuration is reloaded and mutate_fn
        runs again, so it must not depend on a snapshot captured earlier.

        Args:
            product_id: Product ID
            mutate_fn: Pure function from old to new snapshot
            session: Database session

        Returns:
            The saved snapshot with its new version

        Raises:
            VersionConflict: If every retry lost the race
            ProductConfigNotFoundException: If the product is not stored
            PricingEngineException: Whatever mutate_fn raises, without retry

        Example:
            >>> await ProductConfigService.edit(
            ...     "bc-001",
            ...     lambda c: c.model_copy(update={"rush_fee": Decimal("30")}),
            ...     session
            ... )
        """

        @TransactionManager.with_retry()
        async def attempt() -> ProductConfigDTO:
            current = await ProductConfigRepository.load_product_config(product_id, session)
            edited = mutate_fn(current)
            try:
                new_version = await ProductConfigRepository.save_product_config(
                    product_id, edited, current.version, session
                )
            except VersionConflict:
                await session_rollback(session)
                raise
            await session_commit(session)
            return edited.model_copy(update={'version': new_version})

        saved = await attempt()
        logger.debug(f"Saved product {product_id} at version {saved.version}")
        return saved

    # ------------------------------------------------------------------
    # Admin edits
    # ------------------------------------------------------------------

    @staticmethod
    async def insert_tier(product_id: str, tier: PricingTierDTO, session: AsyncSession | Session) -> ProductConfigDTO:
        return await ProductConfigService.edit(
            product_id,
            lambda c: c.model_copy(update={'pricing_tiers': TierTableService.insert_tier(c.pricing_tiers, tier)}),
            session
        )

    @staticmethod
    async def remove_tier(product_id: str, index: int, session: AsyncSession | Session) -> ProductConfigDTO:
        return await ProductConfigService.edit(
            product_id,
            lambda c: c.model_copy(update={'pricing_tiers': TierTableService.remove_tier(c.pricing_tiers, index)}),
            session
        )

    @staticmethod
    async def toggle_addon(
        product_id: str,
        addon_id: str,
        session: AsyncSession | Session,
        set_id: str | None = None
    ) -> ProductConfigDTO:
        """
        Attach or detach a catalog add-on.

        Args:
            set_id: Target set; None means the product's default set, which
                is created on first use

        Raises:
            AddOnNotFoundException: If the add-on is not in the catalog
            InvalidAddOnSetError: If set_id names no set of the product
        """
        addon = await AddOnRepository.get_by_id(addon_id, session)
        if addon is None:
            raise AddOnNotFoundException(addon_id)

        return await ProductConfigService.edit(
            product_id,
            lambda c: ProductConfigService._update_set(
                c, set_id, lambda addon_set: AddOnSetService.toggle_addon(addon_set, addon)
            ),
            session
        )

    @staticmethod
    async def reorder_addons(
        product_id: str,
        from_index: int,
        to_index: int,
        session: AsyncSession | Session,
        set_id: str | None = None
    ) -> ProductConfigDTO:
        """Drag-and-drop reorder inside one add-on set."""
        def reorder(addon_set: AddOnSetDTO) -> AddOnSetDTO:
            items = AddOnSetService.reorder(addon_set.items, from_index, to_index)
            return addon_set.model_copy(update={'items': items})

        return await ProductConfigService.edit(
            product_id,
            lambda c: ProductConfigService._update_set(c, set_id, reorder),
            session
        )

    @staticmethod
    async def toggle_paper_stock(
        product_id: str,
        stock: ProductPaperStockDTO,
        session: AsyncSession | Session
    ) -> ProductConfigDTO:
        return await ProductConfigService.edit(
            product_id,
            lambda c: c.model_copy(update={'paper_stocks': AddOnSetService.toggle_paper_stock(c.paper_stocks, stock)}),
            session
        )

    @staticmethod
    async def set_default_paper_stock(
        product_id: str,
        stock_id: str,
        session: AsyncSession | Session
    ) -> ProductConfigDTO:
        return await ProductConfigService.edit(
            product_id,
            lambda c: c.model_copy(update={
                'paper_stocks': AddOnSetService.set_default_paper_stock(c.paper_stocks, stock_id)
            }),
            session
        )

    @staticmethod
    def _update_set(
        config: ProductConfigDTO,
        set_id: str | None,
        update_fn: Callable[[AddOnSetDTO], AddOnSetDTO]
    ) -> ProductConfigDTO:
        if set_id is None or (config.default_addon_set and config.default_addon_set.id == set_id):
            addon_set = config.default_addon_set or AddOnSetDTO(id=f"{config.product_id}-default", name="Default")
            return config.model_copy(update={'default_addon_set': update_fn(addon_set)})

        extra_sets = list(config.extra_addon_sets)
        for i, addon_set in enumerate(extra_sets):
            if addon_set.id == set_id:
                extra_sets[i] = update_fn(addon_set)
                return config.model_copy(update={'extra_addon_sets': extra_sets})

        raise InvalidAddOnSetError(set_id, 'set_id', set_id, f"product {config.product_id} has no such set")

    # ------------------------------------------------------------------
    # Publication
    # ------------------------------------------------------------------

    @staticmethod
    async def publish(product_id: str, session: AsyncSession | Session) -> ProductConfigDTO:
        """
        Make a product available to the storefront.

        Raises:
            ValidationError: With every violation if the configuration is invalid
        """
        def mark_published(config: ProductConfigDTO) -> ProductConfigDTO:
            ProductValidationService.validate_or_raise(config)
            return config.model_copy(update={'is_published': True})

        published = await ProductConfigService.edit(product_id, mark_published, session)
        logger.info(f"Published product {product_id} (version {published.version})")
        return published

    @staticmethod
    async def unpublish(product_id: str, session: AsyncSession | Session) -> ProductConfigDTO:
        return await ProductConfigService.edit(
            product_id,
            lambda c: c.model_copy(update={'is_published': False}),
            session
        )

    # ------------------------------------------------------------------
    # Storefront
    # ------------------------------------------------------------------

    @staticmethod
    async def quote(selection: PriceSelectionDTO, session: AsyncSession | Session) -> QuoteResultDTO:
        """
        Price a storefront selection against the published configuration.

        Read-only: nothing about the quote is stored.

        Args:
            selection: Customer's live selection
            session: Database session

        Returns:
            QuoteResultDTO with the breakdown and the gang-run decision

        Raises:
            ProductConfigNotFoundException: Unknown product
            ProductNotPublishedException: Product still in draft
            PricingException/AddOnException: See PricingService.resolve_price
        """
        config = await ProductConfigRepository.load_product_config(selection.product_id, session)
        if not config.is_published:
            raise ProductNotPublishedException(selection.product_id)

        add_ons = await AddOnRepository.get_by_ids(config.attached_addon_ids, session)
        breakdown = PricingService.resolve_price(config, selection, add_ons)
        gang_run_allowed = GangRunService.is_gang_run_allowed(config.gang_run, selection.quantity)

        return QuoteResultDTO(breakdown=breakdown, gang_run_allowed=gang_run_allowed)
