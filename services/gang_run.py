import logging

from models.gang_run import GangRunConfigDTO

logger = logging.getLogger(__name__)


class GangRunService:
    """Decides whether an order quantity may share press setup with other orders."""

    @staticmethod
    def is_gang_run_allowed(config: GangRunConfigDTO, requested_quantity: int) -> bool:
        """
        Check a quantity against the product's gang-run range.

        False is not an error: the order simply goes to a standalone
        (non-pooled) production run.

        Example with min=100, max=1000:
            50 → False, 100 → True, 1000 → True, 1001 → False
        """
        if not config.eligible:
            return False

        if config.min_gang_quantity is None or config.max_gang_quantity is None:
            logger.warning("Gang-run eligible product without a quantity range, using standalone run")
            return False

        return config.min_gang_quantity <= requested_quantity <= config.max_gang_quantity
