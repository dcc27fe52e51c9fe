from contextlib import asynccontextmanager
import logging

from ats_matcher.core.scoring_config import load_scoring_config
from ats_matcher.services.optimizer import get_optimizer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    config = load_scoring_config()
    logger.info(
        "scoring_config_loaded weights=%s/%s/%s sections=%s",
        config.coverage_weight,
        config.section_weight,
        config.experience_weight,
        ",".join(config.sections),
    )
    if not get_optimizer().enabled():
        logger.warning("ai_assist_disabled reason=missing_api_key")
    yield
