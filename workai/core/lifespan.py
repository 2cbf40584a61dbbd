from contextlib import asynccontextmanager
import logging
from pathlib import Path

from workai.core.config import settings
from workai.core.job_store import get_job_store
from workai.core.pricing_config import load_band_rules

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = get_job_store()
    store.ensure()
    Path(settings.uploads_dir).mkdir(parents=True, exist_ok=True)

    # Fail at startup, not on the first upload, when the pricing YAML is broken.
    rules = load_band_rules()
    logger.info(
        "workai_startup jobs_db=%s uploads_dir=%s standard_cap=%s under_band_cap=%s",
        store.path,
        settings.uploads_dir,
        rules.standard_upsell_cap,
        rules.under_band_upsell_cap,
    )
    yield
    logger.info("workai_shutdown")
