import logging
import sys
from sqlalchemy import text
from churchfinder.core.database import db
from churchfinder.core.logging_config import setup_logging
from churchfinder.models.user import User, UserRole, UserStatus
from churchfinder.core.security import get_password_hash
from churchfinder.core.config import settings

logger = logging.getLogger(__name__)

def verify_database_connection() -> bool:
    """Check if database is accessible"""
    try:
        with db.session() as session:
            session.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False

def create_superuser() -> bool:
    """Create the first super admin from FIRST_SUPERUSER / FIRST_SUPERUSER_PASSWORD"""
    if not settings.FIRST_SUPERUSER or not settings.FIRST_SUPERUSER_PASSWORD:
        logger.error("FIRST_SUPERUSER and FIRST_SUPERUSER_PASSWORD must be set")
        return False

    if not verify_database_connection():
        logger.error("Cannot create superuser: Database not accessible")
        return False

    email = settings.FIRST_SUPERUSER.lower()
    with db.session() as session:
        existing_user = session.query(User).filter(User.email == email).first()

        if existing_user:
            logger.info(f"Superuser {email} already exists")
            return True

        superuser = User(
            email=email,
            display_name="Super Admin",
            hashed_password=get_password_hash(settings.FIRST_SUPERUSER_PASSWORD),
            role=UserRole.SUPER_ADMIN,
            status=UserStatus.ACTIVE,
        )
        session.add(superuser)

    logger.info(f"Superuser {email} created successfully")
    return True

def main() -> int:
    setup_logging()
    logger.info("Starting superuser creation process...")
    try:
        db.init_db()
        if create_superuser():
            logger.info("Superuser creation process completed successfully")
            return 0
        logger.error("Superuser creation process failed")
        return 1
    except Exception as e:
        logger.error(f"An error occurred: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
