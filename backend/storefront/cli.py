# Overview: Flask CLI command groups for bootstrap and submission review.

# backend/storefront/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (idempotent; prefer `flask db upgrade` for real deployments).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system seed-demo
#   Add a few catalog products and pending submissions for local development.
#
# Submission review (same workflows as the admin API):
# - python -m flask reviews list [--status pending]
# - python -m flask reviews approve 12
# - python -m flask reviews deny 12 --notes "Water damage"
# - python -m flask reviews history 12

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Priced, Product, QuoteRequested, SellerInfo, UsedProduct
from .services import review_service
from .services.concurrency import PersistenceError
from .services.review_service import InvalidSubmissionState, SubmissionNotFound


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete.")


@system_group.command('seed-demo')
@with_appcontext
def seed_demo():
    """Seed catalog products and pending submissions (skips if products exist)."""
    if db.session.query(Product).count():
        click.echo("SKIP Products already exist; nothing seeded.")
        return

    products = [
        Product(title="LED Ceiling Panel 600x600", description="40W neutral white panel.",
                category="lighting", price_cents=4599, stock=25, featured=True, brand="Philips"),
        Product(title="Cordless Drill 18V", description="Two batteries and charger included.",
                category="tools", price_cents=12900, stock=8, brand="Makita"),
        Product(title="Smart Plug", description="Wi-Fi plug with energy monitoring.",
                category="electronics", price_cents=1999, stock=60, featured=True, brand="TP-Link"),
    ]
    db.session.add_all(products)

    submissions = [
        ("Microwave Oven 25L", "Works perfectly, minor scratch on door.", "appliances", "Good",
         Priced(6500), SellerInfo("Ana Silva", "ana@example.com", "+1 555 0101")),
        ("Studio Monitor Pair", "Barely used, original box.", "electronics", "Excellent",
         QuoteRequested(), SellerInfo("Sam Lee", "sam@example.com", "+1 555 0102")),
    ]
    for title, description, category, condition, pricing, seller in submissions:
        used = UsedProduct(title=title, description=description, category=category,
                           condition=condition, status="pending",
                           images=["https://res.cloudinary.com/demo/image/upload/sample.jpg"])
        used.pricing = pricing
        used.seller = seller
        db.session.add(used)

    db.session.commit()
    click.echo(f"PASS Seeded {len(products)} products and {len(submissions)} pending submissions.")


# =============================================================================
# SUBMISSION REVIEW COMMANDS
# =============================================================================

@click.group('reviews')
def reviews_group():
    """Used-product submission review commands."""


@reviews_group.command('list')
@click.option('--status', type=click.Choice(['pending', 'approved', 'rejected']), help='Filter by status')
@with_appcontext
def list_reviews(status):
    """List submissions, newest first."""
    items = review_service.list_used_products(status=status)
    if not items:
        click.echo("No submissions found.")
        return

    click.echo("\n" + "="*80)
    click.echo(f"{'ID':<5} {'Title':<35} {'Status':<10} {'Price':<12} {'Seller'}")
    click.echo("="*80)
    for u in items:
        price = "quote" if u["request_quote"] else f"${u['asking_price_cents'] / 100:,.2f}"
        click.echo(f"{u['id']:<5} {u['title'][:34]:<35} {u['status']:<10} {price:<12} {u['seller']['email']}")
    click.echo("="*80 + "\n")


@reviews_group.command('approve')
@click.argument('used_product_id', type=int)
@with_appcontext
def approve_review(used_product_id):
    """Approve a pending submission and list it as a refurbished product."""
    try:
        result = review_service.approve_used_product(used_product_id)
    except (SubmissionNotFound, InvalidSubmissionState, PersistenceError) as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Approved submission {used_product_id} -> product {result.product['id']}")


@reviews_group.command('deny')
@click.argument('used_product_id', type=int)
@click.option('--notes', help='Reason, kept on the review event')
@with_appcontext
def deny_review(used_product_id, notes):
    """Deny a pending submission (deletes it and its local images)."""
    try:
        result = review_service.deny_used_product(used_product_id, notes=notes)
    except (SubmissionNotFound, InvalidSubmissionState, PersistenceError) as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Denied submission {used_product_id}")
    for w in result.warnings:
        click.echo(f"WARN {w.reference}: {w.reason}")


@reviews_group.command('history')
@click.argument('used_product_id', type=int)
@with_appcontext
def review_history(used_product_id):
    """Show review events for a submission id."""
    events = review_service.list_review_events(used_product_id)
    if not events:
        click.echo("No review events found.")
        return
    for ev in events:
        suffix = f" product={ev['product_id']}" if ev["product_id"] else ""
        notes = f" notes={ev['notes']!r}" if ev["notes"] else ""
        click.echo(f"{ev['occurred_at']} {ev['action']:<9}{suffix}{notes}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(reviews_group)
