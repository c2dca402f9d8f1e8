import os
import tempfile
from datetime import date, datetime, timezone

# Set environment variables BEFORE any imports that might use settings
# Use a temporary directory for test database to avoid permission issues
_test_db_dir = tempfile.mkdtemp()
_test_db_path = os.path.join(_test_db_dir, "test_papeleo.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_test_db_path}"
os.environ["AUTH_JWT_SECRET"] = "test-secret-key-min-32-characters-long-for-testing"
os.environ["AUTH_JWT_ALGORITHM"] = "HS256"
os.environ["DOCGEN_BASE_URL"] = "https://docgen.test/document"

import jwt
import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session

from papeleo.main import app
from papeleo.core.config import settings
from papeleo.db.models.user import User as UserModel
from papeleo.errors import StorageError
from papeleo.services.status import status_cache
from papeleo.services.storage import StorageClient
import papeleo.repositories.contract as contract_repo
import papeleo.repositories.member as member_repo
import papeleo.repositories.organization as organization_repo

COMPLETE_DOCUMENT_DATA = {
    "NOMBRE": "Ana Pérez",
    "TELEFONO": "3001234567",
    "DIRECCIÓN": "Calle 10 # 5-20",
    "IDENTIFICACIÓN": "1020304050",
}


class FakeStorage(StorageClient):
    """In-memory storage. Paths listed in ``unsignable`` fail to sign."""

    def __init__(self):
        super().__init__("https://storage.test", "service-key")
        self.objects: dict[tuple[str, str], bytes] = {}
        self.removed: list[str] = []
        self.unsignable: set[str] = set()

    async def upload(self, path, content, content_type=None, bucket=None, upsert=True):
        self.objects[(bucket or settings.storage_bucket, path)] = content
        return path

    async def create_signed_url(self, path, expires_in, bucket=None):
        bucket = bucket or settings.storage_bucket
        if path in self.unsignable or (bucket, path) not in self.objects:
            raise StorageError(f"Object not found: {path}")
        return f"{self.base_url}/storage/v1/object/sign/{bucket}/{path}?token=t&expires={expires_in}"

    async def remove(self, paths, bucket=None):
        self.removed.extend(paths)

    def has(self, path: str, bucket: str | None = None) -> bool:
        return (bucket or settings.storage_bucket, path) in self.objects


@pytest.fixture(autouse=True)
def clear_status_cache():
    status_cache.clear()
    yield
    status_cache.clear()


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test and run migrations."""
    temp_db_dir = tempfile.mkdtemp()
    test_db_path = os.path.join(temp_db_dir, "test.db")
    test_db_url = f"sqlite:///{test_db_path}"

    test_engine = create_engine(
        test_db_url,
        connect_args={"check_same_thread": False},
        poolclass=None,
    )

    @event.listens_for(test_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )

    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", test_db_url)
    command.upgrade(alembic_cfg, "head")

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        test_engine.dispose()

        for suffix in ["", "-wal", "-shm"]:
            path = f"{test_db_path}{suffix}"
            if os.path.exists(path):
                os.remove(path)
        if os.path.exists(temp_db_dir):
            os.rmdir(temp_db_dir)


@pytest.fixture(scope="function")
def db(db_session):
    """Alias for db_session to match test naming conventions."""
    return db_session


@pytest.fixture(scope="function")
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture(scope="function")
def client(db_session, storage):
    """Create a test client with database and storage dependency overrides."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    from papeleo.api.deps import get_db, get_storage

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    yield TestClient(app)

    app.dependency_overrides.clear()


def make_token(user: UserModel) -> str:
    """Token shaped like the ones issued by the auth provider."""
    return jwt.encode(
        {"sub": user.id, "email": user.email, "aud": "authenticated"},
        settings.auth_jwt_secret,
        algorithm=settings.auth_jwt_algorithm,
    )


def _create_user(db: Session, email: str, **kwargs) -> UserModel:
    user = UserModel(email=email, **kwargs)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def owner_user(db: Session) -> UserModel:
    """Contratante: owns the organization."""
    return _create_user(db, "owner@example.com", username="owner")


@pytest.fixture(scope="function")
def owner_token(owner_user: UserModel) -> str:
    return make_token(owner_user)


@pytest.fixture(scope="function")
def contractor_user(db: Session) -> UserModel:
    """Contratista with complete details and a stored signature."""
    return _create_user(
        db,
        "contractor@example.com",
        username="contractor",
        document_id=dict(COMPLETE_DOCUMENT_DATA),
        signature="https://storage.test/storage/v1/object/public/public/signatures/users/u1/firma.png",
    )


@pytest.fixture(scope="function")
def contractor_token(contractor_user: UserModel) -> str:
    return make_token(contractor_user)


@pytest.fixture(scope="function")
def stranger_user(db: Session) -> UserModel:
    return _create_user(db, "stranger@example.com")


@pytest.fixture(scope="function")
def stranger_token(stranger_user: UserModel) -> str:
    return make_token(stranger_user)


@pytest.fixture(scope="function")
def organization(db: Session, owner_user: UserModel):
    return organization_repo.create_organization(db, "Constructora Andes", owner_user.id)


@pytest.fixture(scope="function")
def project(db: Session, organization):
    return organization_repo.create_project(db, organization.id, "Obra Norte")


@pytest.fixture(scope="function")
def contract(db: Session, project):
    return contract_repo.create_contract(
        db,
        project_id=project.id,
        name="Interventoría",
        contract_draft_url="https://storage.test/storage/v1/object/public/contractual/contracts/p/borrador.pdf",
    )


@pytest.fixture(scope="function")
def precontractual_requirement(db: Session, contract):
    return contract_repo.create_required_document(
        db, contract_id=contract.id, name="RUT", type="precontractual"
    )


@pytest.fixture(scope="function")
def contractual_requirement(db: Session, contract):
    return contract_repo.create_required_document(
        db, contract_id=contract.id, name="Planilla seguridad social", type="contractual"
    )


@pytest.fixture(scope="function")
def member(db: Session, contract, contractor_user):
    """Contractor invited for January through March 2024."""
    return member_repo.create_member(
        db,
        user_id=contractor_user.id,
        contract_id=contract.id,
        value="5.000.000",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 3, 31),
        invited_at=datetime.now(timezone.utc),
    )
