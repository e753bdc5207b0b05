import os, sys, pytest
# Ensure backend directory is on path so 'tracker' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from tracker import create_app, get_db
from tracker.models.authz import Base
# Import all model modules to ensure tables are registered before create_all
import tracker.models.worker  # noqa: F401
import tracker.models.income_record  # noqa: F401
import tracker.models.expense  # noqa: F401
import tracker.models.audit  # noqa: F401


@pytest.fixture(scope='session', autouse=True)
def app_instance():
    app = create_app({'DATABASE_URL': 'sqlite+pysqlite:///:memory:', 'TESTING': True})
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app


@pytest.fixture(autouse=True)
def clean_tables(app_instance):
    """Every test starts from empty tables (shared in-memory database)."""
    yield
    session = get_db()
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture()
def app_context(app_instance):
    with app_instance.app_context():
        yield app_instance


@pytest.fixture()
def client(app_context):
    return app_context.test_client()
