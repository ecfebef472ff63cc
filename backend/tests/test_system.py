# Overview: Pytest coverage for health, media serving, CORS and CLI commands.

from storefront.models import Product, UsedProduct
from tests.conftest import write_upload


class TestSystemRoutes:

    def test_health_reports_counts(self, client, make_submission, make_product):
        make_submission()
        make_product()

        response = client.get("/api/health")

        assert response.status_code == 200
        database = response.get_json()["checks"]["database"]
        assert database["status"] == "healthy"
        assert database["details"] == {"pending_submissions": 1, "active_products": 1}

    def test_serves_local_uploads(self, client, db_session, upload_dir):
        ref = write_upload(upload_dir, "served.png")

        response = client.get(f"/{ref}")

        assert response.status_code == 200
        assert response.data == b"\x89PNG fake image bytes"

    def test_upload_traversal_is_404(self, client, db_session):
        assert client.get("/uploads/../conftest.py").status_code == 404

    def test_cors_for_known_origin(self, client, db_session):
        response = client.get("/api/sell/test", headers={"Origin": "http://localhost:5173"})

        assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"

    def test_no_cors_for_unknown_origin(self, client, db_session):
        response = client.get("/api/sell/test", headers={"Origin": "https://evil.example"})

        assert "Access-Control-Allow-Origin" not in response.headers


class TestReviewCommands:
    """flask reviews ... commands share the service workflows."""

    def test_list_and_approve(self, app, make_submission):
        used = make_submission()
        runner = app.test_cli_runner()

        listed = runner.invoke(args=["reviews", "list", "--status", "pending"])
        approved = runner.invoke(args=["reviews", "approve", str(used.id)])

        assert "Used Stereo Amplifier" in listed.output
        assert approved.exit_code == 0
        assert f"PASS Approved submission {used.id}" in approved.output
        assert Product.query.filter_by(original_used_product_id=used.id).count() == 1

    def test_approve_twice_fails(self, app, make_submission):
        used = make_submission()
        runner = app.test_cli_runner()
        runner.invoke(args=["reviews", "approve", str(used.id)])

        result = runner.invoke(args=["reviews", "approve", str(used.id)])

        assert result.exit_code == 1
        assert "already approved" in result.output

    def test_deny_and_history(self, app, make_submission):
        used = make_submission()
        used_id = used.id
        runner = app.test_cli_runner()

        denied = runner.invoke(args=["reviews", "deny", str(used_id), "--notes", "Counterfeit"])
        history = runner.invoke(args=["reviews", "history", str(used_id)])

        assert denied.exit_code == 0
        assert UsedProduct.query.filter_by(id=used_id).count() == 0
        assert "denied" in history.output
        assert "Counterfeit" in history.output

    def test_deny_missing(self, app, db_session):
        result = app.test_cli_runner().invoke(args=["reviews", "deny", "999"])

        assert result.exit_code == 1
        assert "Used product not found" in result.output


class TestSystemCommands:

    def test_seed_demo_is_idempotent(self, app, db_session):
        runner = app.test_cli_runner()

        first = runner.invoke(args=["system", "seed-demo"])
        second = runner.invoke(args=["system", "seed-demo"])

        assert first.exit_code == 0
        assert "SKIP" in second.output
        assert Product.query.count() == 3
        assert UsedProduct.query.filter_by(status="pending").count() == 2
