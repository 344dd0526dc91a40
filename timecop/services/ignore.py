"""
Ignore flags: branches the user never wants to be asked about.
"""
from sqlalchemy.orm import Session

from timecop.core.logging_config import get_logger
from timecop.models.ignored import IgnoredContext

log = get_logger("timecop.ignore")


def set_ignore_flag(db: Session, context: str) -> IgnoredContext:
    flag = IgnoredContext(context=context)
    db.add(flag)
    db.commit()
    log.info("ignoring %s", context)
    return flag


def is_ignored(db: Session, context: str) -> bool:
    return (
        db.query(IgnoredContext.id)
        .filter(IgnoredContext.context == context)
        .first()
        is not None
    )
