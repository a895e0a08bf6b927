"""Database configuration and initialization."""
from sqlalchemy import BigInteger, Integer, create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Create SQLAlchemy base
Base = declarative_base()

# BIGINT primary keys only autoincrement on SQLite when declared as INTEGER
BigIntPK = BigInteger().with_variant(Integer, 'sqlite')

# Global session and engine
engine = None
db_session = None


def build_engine(database_uri: str, echo: bool = False):
    """
    Create an engine with pool and locking settings for the backend.

    SQLite ignores SELECT ... FOR UPDATE, so file-backed databases open every
    transaction with BEGIN IMMEDIATE: writers queue on the database lock
    (up to the 30s busy timeout) instead of interleaving read-then-write.
    """
    url = make_url(database_uri)

    if url.get_backend_name() != 'sqlite':
        return create_engine(
            database_uri,
            echo=echo,
            pool_pre_ping=True,  # Enable connection health checks
            pool_size=10,
            max_overflow=20
        )

    if url.database in (None, '', ':memory:'):
        # One shared connection so an in-memory database survives across sessions
        return create_engine(
            database_uri,
            echo=echo,
            poolclass=StaticPool,
            connect_args={'check_same_thread': False}
        )

    sqlite_engine = create_engine(
        database_uri,
        echo=echo,
        connect_args={'check_same_thread': False, 'timeout': 30}
    )

    @event.listens_for(sqlite_engine, 'connect')
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        # Let the begin hook below emit BEGIN itself
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, 'begin')
    def _begin_immediate(conn):
        conn.exec_driver_sql('BEGIN IMMEDIATE')

    return sqlite_engine


def init_db(app):
    """Initialize database connection."""
    global engine, db_session

    engine = build_engine(
        app.config['SQLALCHEMY_DATABASE_URI'],
        echo=app.config.get('SQLALCHEMY_ECHO', False)
    )

    db_session = scoped_session(
        sessionmaker(autoflush=False, bind=engine)
    )

    Base.query = db_session.query_property()

    # Register teardown
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Close database session and rollback on error."""
        if exception:
            db_session.rollback()
        db_session.remove()


def create_schema():
    """Create every table known to the models package."""
    import orderdesk.models  # noqa: F401  (registers the mappers)
    Base.metadata.create_all(bind=engine)


def drop_schema():
    """Drop every table known to the models package."""
    import orderdesk.models  # noqa: F401
    Base.metadata.drop_all(bind=engine)


def get_session():
    """Get database session."""
    return db_session
