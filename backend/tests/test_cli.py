# Overview: Tests for the flask CLI command groups.

from ventaspro.models import Product, SalesSession
from ventaspro.services import session_service
from ventaspro.services.sales_service import checkout


def test_init_db_opens_session(app, db_session):
    result = app.test_cli_runner().invoke(args=["ledger", "init-db"])

    assert result.exit_code == 0
    assert "Open session" in result.output
    assert db_session.query(SalesSession).filter_by(is_closed=False).count() == 1


def test_sessions_close(app, db_session):
    opened = session_service.get_current_session().id
    runner = app.test_cli_runner()

    result = runner.invoke(args=["sessions", "close"])
    assert result.exit_code == 0
    assert f"Session {opened} closed" in result.output

    history = runner.invoke(args=["sessions", "history"])
    assert str(opened) in history.output


def test_products_add_and_list(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["products", "add", "--name", "Alfajor", "--price", "1.25", "--stock", "12"])
    assert result.exit_code == 0
    assert db_session.query(Product).filter_by(name="Alfajor").one().stock == 12

    listed = runner.invoke(args=["products", "list"])
    assert "Alfajor" in listed.output


def test_products_add_rejects_bad_price(app, db_session):
    result = app.test_cli_runner().invoke(args=["products", "add", "--name", "X", "--price", "-2", "--stock", "1"])
    assert result.exit_code != 0
    assert db_session.query(Product).count() == 0


def test_reports_session(app, db_session, product_a):
    checkout(items=[{"product_id": product_a, "quantity": 2, "unit_price": 10}], payment_method="cash", total=20)
    session_id = session_service.get_current_session().id
    runner = app.test_cli_runner()

    summary = runner.invoke(args=["reports", "session", str(session_id)])
    assert summary.exit_code == 0
    assert "Cash:     20.00" in summary.output

    exported = runner.invoke(args=["reports", "session", str(session_id), "--csv"])
    assert exported.output.startswith("SESSION SUMMARY")

    missing = runner.invoke(args=["reports", "session", "999999"])
    assert missing.exit_code != 0
