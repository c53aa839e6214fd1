import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import OperationalError

from faultdemo.db.session import get_engine, open_store
from faultdemo.services.migration_service import MigrationError, run_faulty_migration


def test_faulty_migration_raises_and_rolls_back() -> None:
    engine = open_store()

    with pytest.raises(MigrationError) as excinfo:
        run_faulty_migration(engine)

    assert str(excinfo.value) == "alter table: no such table: imaginary"
    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert inspect(engine).get_table_names() == []


def test_faulty_migration_is_repeatable() -> None:
    engine = get_engine()
    for _ in range(3):
        with pytest.raises(MigrationError, match="alter table"):
            run_faulty_migration(engine)


def test_begin_failure_is_reported_as_begin_tx(tmp_path) -> None:
    # The parent directory does not exist, so no connection can be opened.
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'demo.db'}")

    with pytest.raises(MigrationError, match="^begin tx: "):
        run_faulty_migration(engine)
