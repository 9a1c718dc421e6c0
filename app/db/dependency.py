from .session import SessionLocal

def get_db():
    """
    Dependency to get a database session.
    Yields a database session, rolls back whatever the request left
    uncommitted if the handler raised, and ensures it is closed after use.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
