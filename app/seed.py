"""Bootstrap accounts created on a fresh database."""
import logging
import os

from sqlalchemy.orm import Session

from .roles import Role
from .services.user_service import UserService

logger = logging.getLogger('gamepulse.seed')

DEMO_EMAIL = 'demo@gamepulse.com'
DEMO_PASSWORD = 'demo123'
DEMO_NAME = 'Demo User'

OWNER_EMAIL = 'aterrealms@gmail.com'
OWNER_NAME = 'Website Owner'


def seed_default_accounts(db: Session, users: UserService) -> int:
    """Create the demo account and, when ``GAMEPULSE_OWNER_PASSWORD`` is
    set, the site owner account.  Existing accounts are left untouched.

    Returns:
        Number of accounts created.
    """
    created = 0
    if users.ensure_account(db, DEMO_EMAIL, DEMO_PASSWORD, DEMO_NAME, Role.GAMER.value):
        created += 1
    owner_password = os.getenv('GAMEPULSE_OWNER_PASSWORD', '')
    if owner_password:
        if users.ensure_account(db, OWNER_EMAIL, owner_password, OWNER_NAME, Role.OWNER.value):
            created += 1
    else:
        logger.info("GAMEPULSE_OWNER_PASSWORD not set; skipping owner account")
    if created:
        logger.info("Seeded %d bootstrap account(s)", created)
    return created
